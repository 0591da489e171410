"""Swagger 2.0 parser.

Swagger 2.0 has no request-body concept: the payload is a parameter with
``in: body``. :class:`SwaggerV2Parser` pulls that parameter out of the list
and promotes it to :class:`~specreport.models.NormalizedRequestBody`. Every
other location passes through unchanged, ``formData`` included.

Non-body parameters carry their type inline (``type``/``format``/``items``)
rather than in a ``schema``; a schema is synthesized from those keys so
that every normalized parameter looks the same downstream.
"""

from __future__ import annotations

from typing import Any, Optional

from specreport.models import (
    NormalizedParameter,
    NormalizedRequestBody,
    NormalizedResponse,
    NormalizedSchema,
    ParameterLocation,
    ServerInfo,
    SpecVersion,
)
from specreport.parser.base import SpecParser
from specreport.parser.normalizer import DEFAULT_MEDIA_TYPE, normalize_swagger_schema

_LOCATIONS = {
    "query": ParameterLocation.QUERY,
    "header": ParameterLocation.HEADER,
    "path": ParameterLocation.PATH,
    "formData": ParameterLocation.FORM_DATA,
    "body": ParameterLocation.BODY,
}


class SwaggerV2Parser(SpecParser):
    """Parser for documents declaring ``swagger: "2.0"``."""

    http_methods = frozenset({"get", "post", "put", "delete", "patch", "options", "head"})

    def get_version(self) -> SpecVersion:
        return SpecVersion.SWAGGER_2_0

    def is_valid_spec(self) -> bool:
        return (
            self.spec.get("swagger") == "2.0"
            and self._has_required_sections()
        )

    def normalize_schema(self, raw: Any) -> NormalizedSchema:
        return normalize_swagger_schema(raw)

    def _normalize_parameters(self, raw_params: list[Any]) -> list[NormalizedParameter]:
        parameters: list[NormalizedParameter] = []
        for param in raw_params:
            if not isinstance(param, dict) or param.get("in") == "body":
                continue
            parameters.append(
                NormalizedParameter(
                    name=param.get("name", ""),
                    location=_LOCATIONS.get(param.get("in", ""), ParameterLocation.QUERY),
                    description=param.get("description"),
                    required=param.get("required"),
                    schema=self._parameter_schema(param),
                )
            )
        return parameters

    def _parameter_schema(self, param: dict[str, Any]) -> NormalizedSchema:
        """Use the declared schema, or synthesize one from the inline type keys."""
        if "schema" in param:
            return self.normalize_schema(param["schema"])

        items = param.get("items")
        return NormalizedSchema(
            type=param.get("type") or "string",
            format=param.get("format"),
            enum=param.get("enum"),
            items=self.normalize_schema(items) if isinstance(items, dict) else None,
        )

    def _normalize_request_body(
        self, operation: dict[str, Any]
    ) -> Optional[NormalizedRequestBody]:
        body_param = next(
            (
                p
                for p in operation.get("parameters") or []
                if isinstance(p, dict) and p.get("in") == "body"
            ),
            None,
        )
        if body_param is None:
            return None

        schema = body_param.get("schema")
        return NormalizedRequestBody(
            description=body_param.get("description"),
            required=body_param.get("required"),
            schema=self.normalize_schema(schema) if schema else None,
            media_type=DEFAULT_MEDIA_TYPE,
        )

    def _normalize_response(self, status_code: str, response: dict[str, Any]) -> NormalizedResponse:
        schema = response.get("schema")
        return NormalizedResponse(
            status_code=status_code,
            description=response.get("description") or "",
            schema=self.normalize_schema(schema) if schema else None,
            media_type=DEFAULT_MEDIA_TYPE,
        )

    def _normalize_servers(self) -> Optional[list[ServerInfo]]:
        """Synthesize the single server from ``schemes``, ``host`` and ``basePath``."""
        host = self.spec.get("host")
        if not host:
            return None

        schemes = self.spec.get("schemes") or ["https"]
        base_path = self.spec.get("basePath") or ""
        return [ServerInfo(url=f"{schemes[0]}://{host}{base_path}", description="API Server")]

    def _definitions(self) -> dict[str, Any]:
        definitions = self.spec.get("definitions")
        return definitions if isinstance(definitions, dict) else {}
