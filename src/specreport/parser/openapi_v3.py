"""OpenAPI 3.0 / 3.1 parser.

Request and response bodies in OpenAPI 3.x are keyed by media type. Only the
representative media type chosen by
:func:`~specreport.parser.normalizer.select_media_type` reaches the
normalized model; the schemas of any other media types are dropped.
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
from specreport.parser.normalizer import normalize_openapi_schema, select_media_type
from specreport.parser.resolver import deref


class OpenAPIV3Parser(SpecParser):
    """Parser for documents declaring ``openapi: "3.0.x"`` or ``"3.1.x"``."""

    http_methods = frozenset(
        {"get", "post", "put", "delete", "patch", "options", "head", "trace"}
    )

    def get_version(self) -> SpecVersion:
        if str(self.spec.get("openapi", "")).startswith("3.1"):
            return SpecVersion.OPENAPI_3_1
        return SpecVersion.OPENAPI_3_0

    def is_valid_spec(self) -> bool:
        openapi = self.spec.get("openapi")
        return (
            isinstance(openapi, str)
            and openapi.startswith("3.")
            and self._has_required_sections()
        )

    def normalize_schema(self, raw: Any) -> NormalizedSchema:
        return normalize_openapi_schema(raw)

    def _normalize_parameters(self, raw_params: list[Any]) -> list[NormalizedParameter]:
        parameters: list[NormalizedParameter] = []
        for param in raw_params:
            if not isinstance(param, dict):
                continue
            try:
                location = ParameterLocation(param.get("in", "query"))
            except ValueError:
                location = ParameterLocation.QUERY

            parameters.append(
                NormalizedParameter(
                    name=param.get("name", ""),
                    location=location,
                    description=param.get("description"),
                    required=param.get("required"),
                    schema=self._parameter_schema(param),
                )
            )
        return parameters

    def _parameter_schema(self, param: dict[str, Any]) -> Optional[NormalizedSchema]:
        """Read ``schema``, or the primary media type of ``content`` for complex parameters."""
        if "schema" in param:
            return self.normalize_schema(param["schema"])
        content = param.get("content")
        if content:
            return self._media_schema(content, select_media_type(content))
        return None

    def _normalize_request_body(
        self, operation: dict[str, Any]
    ) -> Optional[NormalizedRequestBody]:
        body = deref(operation.get("requestBody"), self.spec)
        if not isinstance(body, dict):
            return None

        content = body.get("content") or {}
        media_type = select_media_type(content)
        return NormalizedRequestBody(
            description=body.get("description"),
            required=body.get("required"),
            schema=self._media_schema(content, media_type),
            media_type=media_type,
        )

    def _normalize_response(self, status_code: str, response: dict[str, Any]) -> NormalizedResponse:
        content = response.get("content")
        schema = None
        media_type = None
        if content:
            media_type = select_media_type(content)
            schema = self._media_schema(content, media_type)

        return NormalizedResponse(
            status_code=status_code,
            description=response.get("description") or "",
            schema=schema,
            media_type=media_type,
        )

    def _media_schema(
        self, content: dict[str, Any], media_type: str
    ) -> Optional[NormalizedSchema]:
        media = content.get(media_type)
        if not isinstance(media, dict) or not media.get("schema"):
            return None
        return self.normalize_schema(media["schema"])

    def _normalize_servers(self) -> Optional[list[ServerInfo]]:
        servers = self.spec.get("servers")
        if not isinstance(servers, list):
            return None
        return [
            ServerInfo(url=server.get("url", "/"), description=server.get("description"))
            for server in servers
            if isinstance(server, dict)
        ]

    def _definitions(self) -> dict[str, Any]:
        components = self.spec.get("components") or {}
        schemas = components.get("schemas")
        return schemas if isinstance(schemas, dict) else {}
