"""Build render-ready request and response tables for each endpoint.

Renderers get plain data from here and only decide how it looks. Each
parameter becomes either an expanded field table (when its schema expands to
at least one row) or a single :class:`~specreport.models.ParameterRow`. Each
response becomes either a field table or a simple status row.

Table captions carry the endpoint, e.g. ``[GET /pets] RESPONSE``.
"""

from __future__ import annotations

from specreport.expansion import expand_schema, format_schema
from specreport.models import (
    ApiEndpoint,
    EndpointReport,
    FieldTable,
    GroupReport,
    LegacyParameter,
    LegacySpec,
    NormalizedSchema,
    ParameterRow,
    ReportDocument,
    ResponseSection,
)

REQUEST_HEADING = "REQUEST BODY - application/json"
RESPONSE_HEADING = "RESPONSE MODEL - application/json"

LOCATION_LABELS = {
    "query": "Query",
    "body": "Body",
    "path": "Path",
    "header": "Header",
    "formData": "Form Data",
}


def endpoint_caption(endpoint: ApiEndpoint) -> str:
    return f"{endpoint.method} {endpoint.path}"


def location_label(location: str) -> str:
    """Display label for a parameter location; unknown locations pass through."""
    return LOCATION_LABELS.get(location, location)


def parameter_type(param: LegacyParameter) -> str:
    if param.schema_ is not None:
        return format_schema(param.schema_)
    return param.type or "string"


def build_request_tables(
    endpoint: ApiEndpoint, definitions: dict[str, NormalizedSchema]
) -> tuple[list[FieldTable], list[ParameterRow]]:
    """Split the parameters of *endpoint* into field tables and simple rows.

    Returns:
        ``(tables, rows)`` in parameter declaration order.
    """
    caption = f"[{endpoint_caption(endpoint)}] REQUEST"
    tables: list[FieldTable] = []
    rows: list[ParameterRow] = []

    for param in endpoint.parameters:
        fields = expand_schema(param.schema_, definitions)
        if fields:
            tables.append(FieldTable(heading=REQUEST_HEADING, caption=caption, rows=fields))
            continue
        rows.append(
            ParameterRow(
                name=param.name,
                location=location_label(param.location),
                type=parameter_type(param),
                required=bool(param.required),
                description=param.description or "",
            )
        )

    return tables, rows


def build_response_tables(
    endpoint: ApiEndpoint, definitions: dict[str, NormalizedSchema]
) -> list[ResponseSection]:
    """Build one section per status code, in declaration order."""
    caption = f"[{endpoint_caption(endpoint)}] RESPONSE"
    sections: list[ResponseSection] = []

    for status, response in endpoint.responses.items():
        fields = expand_schema(response.schema_, definitions)
        if fields:
            sections.append(
                ResponseSection(
                    status_code=status,
                    description=response.description,
                    table=FieldTable(heading=RESPONSE_HEADING, caption=caption, rows=fields),
                )
            )
        else:
            row_type = format_schema(response.schema_) if response.schema_ else "string"
            sections.append(
                ResponseSection(
                    status_code=status,
                    description=response.description,
                    row_type=row_type,
                )
            )

    return sections


def build_endpoint_report(
    endpoint: ApiEndpoint, definitions: dict[str, NormalizedSchema]
) -> EndpointReport:
    request_tables, parameter_rows = build_request_tables(endpoint, definitions)
    return EndpointReport(
        method=endpoint.method,
        path=endpoint.path,
        caption=endpoint_caption(endpoint),
        summary=endpoint.summary,
        description=endpoint.description,
        deprecated=endpoint.deprecated,
        request_tables=request_tables,
        parameter_rows=parameter_rows,
        responses=build_response_tables(endpoint, definitions),
    )


def build_document(spec: LegacySpec) -> ReportDocument:
    """Expand every endpoint of *spec* into the serializable report."""
    return ReportDocument(
        title=spec.title,
        version=spec.version,
        groups=[
            GroupReport(
                name=group.name,
                endpoints=[
                    build_endpoint_report(endpoint, spec.definitions)
                    for endpoint in group.endpoints
                ],
            )
            for group in spec.groups
        ],
    )
