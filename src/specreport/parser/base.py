"""Shared contract for the dialect-specific specification parsers.

Both :class:`~specreport.parser.swagger_v2.SwaggerV2Parser` and
:class:`~specreport.parser.openapi_v3.OpenAPIV3Parser` implement
:class:`SpecParser`. The version detector in
:mod:`~specreport.parser.factory` picks one of them from the document's
version marker, so callers only ever talk to this interface::

    parser = create_parser(raw)
    if parser.is_valid_spec():
        spec = parser.normalize()

Everything dialect-neutral -- walking ``paths``, reading ``info`` and the tag
catalog, building :class:`~specreport.models.NormalizedOperation` -- lives
here; subclasses only supply the parameter, body, response, schema, and
server conversions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, Optional

from specreport.models import (
    APIInfo,
    NormalizedApiSpec,
    NormalizedOperation,
    NormalizedParameter,
    NormalizedRequestBody,
    NormalizedResponse,
    NormalizedSchema,
    ServerInfo,
    SpecVersion,
    TagInfo,
)
from specreport.parser.resolver import deref


class SpecParser(ABC):
    """Abstract parser turning one raw document into a :class:`NormalizedApiSpec`.

    Args:
        spec: The raw specification dict, as produced by
            :func:`~specreport.parser.loader.load_spec` or any JSON parser.
    """

    #: Lower-case path-item keys treated as HTTP operations.
    http_methods: frozenset[str] = frozenset()

    def __init__(self, spec: dict[str, Any]) -> None:
        self.spec = spec

    @abstractmethod
    def get_version(self) -> SpecVersion:
        """Return the dialect tag this parser produces."""

    @abstractmethod
    def is_valid_spec(self) -> bool:
        """Check the dialect marker and the presence of ``info`` and ``paths``."""

    @abstractmethod
    def normalize_schema(self, raw: Any) -> NormalizedSchema:
        """Normalize a *Schema Object* of this dialect."""

    @abstractmethod
    def _normalize_parameters(self, raw_params: list[Any]) -> list[NormalizedParameter]:
        ...

    @abstractmethod
    def _normalize_request_body(
        self, operation: dict[str, Any]
    ) -> Optional[NormalizedRequestBody]:
        ...

    @abstractmethod
    def _normalize_response(self, status_code: str, response: dict[str, Any]) -> NormalizedResponse:
        ...

    @abstractmethod
    def _normalize_servers(self) -> Optional[list[ServerInfo]]:
        ...

    @abstractmethod
    def _definitions(self) -> dict[str, Any]:
        """Return the raw definitions dictionary of this dialect."""

    def normalize(self) -> NormalizedApiSpec:
        """Walk the whole document and build the normalized spec.

        Every path entry is visited in document order and, inside it, every
        key recognised as an HTTP method for this dialect. Other path-item
        keys (shared ``parameters``, ``summary``, ``description``,
        extensions) are skipped.

        Returns:
            A frozen :class:`~specreport.models.NormalizedApiSpec`.
        """
        operations = [
            self._normalize_operation(method, path, operation)
            for path, method, operation in self._iter_operations()
        ]

        return NormalizedApiSpec(
            version=self.get_version(),
            info=self._normalize_info(),
            servers=self._normalize_servers(),
            operations=operations,
            schemas={
                name: self.normalize_schema(definition)
                for name, definition in self._definitions().items()
            },
            tags=self._normalize_tags(),
        )

    # ------------------------------------------------------------------ #
    # Shared helpers
    # ------------------------------------------------------------------ #

    def _iter_operations(self) -> Iterator[tuple[str, str, dict[str, Any]]]:
        """Yield ``(path, method, operation)`` for every recognised operation."""
        paths = self.spec.get("paths") or {}
        for path, path_item in paths.items():
            path_item = deref(path_item, self.spec)
            if not isinstance(path_item, dict):
                continue
            for method, operation in path_item.items():
                if method.lower() not in self.http_methods:
                    continue
                if not isinstance(operation, dict):
                    continue
                yield path, method, operation

    def _normalize_operation(
        self, method: str, path: str, operation: dict[str, Any]
    ) -> NormalizedOperation:
        raw_params = [deref(p, self.spec) for p in operation.get("parameters") or []]
        responses = operation.get("responses") or {}

        return NormalizedOperation(
            method=method.upper(),
            path=path,
            operation_id=operation.get("operationId"),
            summary=operation.get("summary"),
            description=operation.get("description"),
            tags=operation.get("tags") or [],
            parameters=self._normalize_parameters(raw_params),
            request_body=self._normalize_request_body({**operation, "parameters": raw_params}),
            responses=[
                self._normalize_response(str(status), deref(response, self.spec) or {})
                for status, response in responses.items()
            ],
            deprecated=bool(operation.get("deprecated", False)),
        )

    def _has_required_sections(self) -> bool:
        """Return True when both ``info`` and ``paths`` are present objects."""
        return isinstance(self.spec.get("info"), dict) and isinstance(
            self.spec.get("paths"), dict
        )

    def _normalize_info(self) -> APIInfo:
        info = self.spec.get("info") or {}
        return APIInfo(
            title=str(info.get("title", "")),
            version=str(info.get("version", "")),
            description=info.get("description"),
        )

    def _normalize_tags(self) -> Optional[list[TagInfo]]:
        tags = self.spec.get("tags")
        if not isinstance(tags, list):
            return None
        return [
            TagInfo(name=tag["name"], description=tag.get("description"))
            for tag in tags
            if isinstance(tag, dict) and "name" in tag
        ]
