"""Reshape a :class:`~specreport.models.NormalizedApiSpec` into tag groups.

Renderers consume :class:`~specreport.models.LegacySpec`: endpoints grouped
by their primary tag, groups sorted by name, endpoints sorted by path, with
summary and description always filled in. The request body is folded back
into the parameter list as a synthetic parameter named ``body``.

Schemas stay typed throughout. :func:`convert_schema` only collapses the
OpenAPI 3.x ``anyOf``/``oneOf`` keywords into ``all_of`` so the expansion
engine sees a single composition form. The collapse is lossy: when several
keywords are present the last one wins (``oneOf`` over ``anyOf`` over
``allOf``). The JSON form with ``#/definitions/`` pointers and parent
``required`` lists is produced on demand by :func:`schema_to_legacy` and
:func:`to_legacy_dict`.
"""

from __future__ import annotations

from typing import Any, Optional

from specreport.models import (
    ApiEndpoint,
    ApiGroup,
    LegacyParameter,
    LegacyResponse,
    LegacySpec,
    NormalizedApiSpec,
    NormalizedOperation,
    NormalizedSchema,
    ParameterLocation,
)

DEFAULT_TAG = "Other"

_SUMMARY_VERBS = {
    "GET": "Get",
    "POST": "Add",
    "PUT": "Update",
    "DELETE": "Delete",
    "PATCH": "Partially Update",
}

# Legacy JSON keys emitted for scalar schema attributes, in output order
_SCALAR_KEYS = (
    ("type", "type"),
    ("format", "format"),
    ("description", "description"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("min_length", "minLength"),
    ("max_length", "maxLength"),
    ("enum", "enum"),
)


def to_legacy_shape(spec: NormalizedApiSpec) -> LegacySpec:
    """Group, sort and default the operations of *spec*.

    Args:
        spec: A normalized specification.

    Returns:
        The grouped shape, with ``definitions`` converted by
        :func:`convert_schemas_to_definitions`.
    """
    buckets: dict[str, list[ApiEndpoint]] = {}
    for operation in spec.operations:
        endpoint = convert_operation(operation)
        buckets.setdefault(endpoint.tag, []).append(endpoint)

    groups = [
        ApiGroup(name=name, endpoints=sorted(endpoints, key=lambda e: e.path))
        for name, endpoints in buckets.items()
    ]
    groups.sort(key=lambda g: g.name)

    return LegacySpec(
        title=spec.info.title,
        version=spec.info.version,
        groups=groups,
        definitions=convert_schemas_to_definitions(spec.schemas),
    )


def convert_operation(operation: NormalizedOperation) -> ApiEndpoint:
    parameters = [
        LegacyParameter(
            name=param.name,
            location=_legacy_location(param.location),
            required=param.required,
            type=param.schema_.type if param.schema_ else None,
            schema=convert_schema(param.schema_),
            description=param.description,
        )
        for param in operation.parameters
    ]

    body = operation.request_body
    if body is not None:
        parameters.append(
            LegacyParameter(
                name="body",
                location=ParameterLocation.BODY.value,
                required=body.required,
                type=body.schema_.type if body.schema_ else None,
                schema=convert_schema(body.schema_),
                description=body.description,
            )
        )

    responses = {
        response.status_code: LegacyResponse(
            description=response.description,
            schema=convert_schema(response.schema_),
        )
        for response in operation.responses
    }

    return ApiEndpoint(
        method=operation.method,
        path=operation.path,
        tag=operation.tags[0] if operation.tags and operation.tags[0] else DEFAULT_TAG,
        operation_id=operation.operation_id,
        summary=operation.summary or default_summary(operation.method, operation.path),
        description=operation.description
        or default_description(operation.method, operation.path, operation.operation_id),
        parameters=parameters,
        responses=responses,
        deprecated=operation.deprecated,
    )


def default_summary(method: str, path: str) -> str:
    """Build ``"{Verb} {lastPathSegment}"``, e.g. ``"Get pets"`` for ``GET /pets``."""
    method = method.upper()
    segments = [segment for segment in path.split("/") if segment]
    last = segments[-1] if segments else "API"
    return f"{_SUMMARY_VERBS.get(method, method)} {last}"


def default_description(method: str, path: str, operation_id: Optional[str]) -> str:
    if operation_id:
        return f"Operation ID: {operation_id}"
    return f"Operation for {method.upper()} {path}"


def _legacy_location(location: ParameterLocation) -> str:
    # Renderers know no cookie location
    if location == ParameterLocation.COOKIE:
        return ParameterLocation.HEADER.value
    return location.value


def convert_schema(schema: Optional[NormalizedSchema]) -> Optional[NormalizedSchema]:
    """Re-encode *schema* for renderers, collapsing ``anyOf``/``oneOf`` into ``all_of``.

    Pushed-down ``required`` flags and ``ref`` names are kept as they are.
    """
    if schema is None:
        return None

    update: dict[str, Any] = {"any_of": None, "one_of": None}
    if schema.items is not None:
        update["items"] = convert_schema(schema.items)
    if schema.properties is not None:
        update["properties"] = {
            name: convert_schema(prop) for name, prop in schema.properties.items()
        }

    composition: Optional[list[NormalizedSchema]] = None
    for members in (schema.all_of, schema.any_of, schema.one_of):
        if members is not None:
            composition = members
    if composition is not None:
        update["all_of"] = [convert_schema(member) for member in composition]

    return schema.model_copy(update=update)


def convert_schemas_to_definitions(
    schemas: dict[str, NormalizedSchema],
) -> dict[str, NormalizedSchema]:
    return {name: convert_schema(schema) for name, schema in schemas.items()}


def schema_to_legacy(schema: NormalizedSchema) -> dict[str, Any]:
    """Render *schema* as a Swagger 2.0 style JSON dict.

    ``ref`` becomes ``{"$ref": "#/definitions/<name>"}``, child ``required``
    flags become the parent's ``required`` name list, and ``anyOf``/``oneOf``
    are emitted as ``allOf``. Unset attributes are omitted.

    Example::

        >>> schema_to_legacy(NormalizedSchema(properties={
        ...     "id": NormalizedSchema(type="integer", required=True),
        ... }))
        {'properties': {'id': {'type': 'integer'}}, 'required': ['id']}
    """
    converted = convert_schema(schema)
    assert converted is not None
    return _encode(converted)


def _encode(schema: NormalizedSchema) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for attr, key in _SCALAR_KEYS:
        value = getattr(schema, attr)
        if value is not None:
            result[key] = value

    if schema.ref:
        result["$ref"] = f"#/definitions/{schema.ref}"

    if schema.items is not None:
        result["items"] = _encode(schema.items)

    if schema.properties is not None:
        result["properties"] = {
            name: _encode(prop) for name, prop in schema.properties.items()
        }
        required = [name for name, prop in schema.properties.items() if prop.required]
        if required:
            result["required"] = required

    if schema.all_of is not None:
        result["allOf"] = [_encode(member) for member in schema.all_of]

    return result


def to_legacy_dict(spec: LegacySpec) -> dict[str, Any]:
    """Serialize *spec* to the JSON legacy shape handed to external renderers."""
    return {
        "title": spec.title,
        "version": spec.version,
        "groups": [
            {
                "name": group.name,
                "endpoints": [_endpoint_to_dict(endpoint) for endpoint in group.endpoints],
            }
            for group in spec.groups
        ],
        "definitions": {
            name: _encode(schema) for name, schema in spec.definitions.items()
        },
    }


def _endpoint_to_dict(endpoint: ApiEndpoint) -> dict[str, Any]:
    data = endpoint.model_dump(
        by_alias=True, exclude_none=True, exclude={"parameters", "responses"}
    )
    data["parameters"] = []
    for param in endpoint.parameters:
        entry = param.model_dump(by_alias=True, exclude_none=True, exclude={"schema_"})
        if param.schema_ is not None:
            entry["schema"] = _encode(param.schema_)
        data["parameters"].append(entry)

    data["responses"] = {}
    for status, response in endpoint.responses.items():
        entry = {"description": response.description}
        if response.schema_ is not None:
            entry["schema"] = _encode(response.schema_)
        data["responses"][status] = entry
    return data
