"""Detect the dialect of a raw document and build the matching parser.

Detection looks at exactly two marker fields and nothing else:

* ``swagger: "2.0"`` (the exact string) selects Swagger 2.0.
* A string ``openapi`` starting with ``3.0`` or ``3.1`` selects the matching
  OpenAPI 3.x tag.

Anything else is unsupported. Selection is a plain lookup from
:class:`~specreport.models.SpecVersion` to parser class.
"""

from __future__ import annotations

from typing import Any, Optional

from specreport.exceptions import InvalidSpecError, UnsupportedSpecError
from specreport.models import NormalizedApiSpec, SpecSummary, SpecVersion
from specreport.parser.base import SpecParser
from specreport.parser.openapi_v3 import OpenAPIV3Parser
from specreport.parser.swagger_v2 import SwaggerV2Parser

SUPPORTED_VERSIONS: tuple[SpecVersion, ...] = (
    SpecVersion.SWAGGER_2_0,
    SpecVersion.OPENAPI_3_0,
    SpecVersion.OPENAPI_3_1,
)

_PARSERS: dict[SpecVersion, type[SpecParser]] = {
    SpecVersion.SWAGGER_2_0: SwaggerV2Parser,
    SpecVersion.OPENAPI_3_0: OpenAPIV3Parser,
    SpecVersion.OPENAPI_3_1: OpenAPIV3Parser,
}


def detect_version(raw: Any) -> Optional[SpecVersion]:
    """Return the dialect tag of *raw*, or ``None`` when no marker matches.

    Example::

        >>> detect_version({"swagger": "2.0"})
        <SpecVersion.SWAGGER_2_0: 'swagger-2.0'>
        >>> detect_version({"openapi": "3.1.0"})
        <SpecVersion.OPENAPI_3_1: 'openapi-3.1'>
        >>> detect_version({"openapi": 3.0}) is None
        True
    """
    if not isinstance(raw, dict):
        return None

    if raw.get("swagger") == "2.0":
        return SpecVersion.SWAGGER_2_0

    openapi = raw.get("openapi")
    if isinstance(openapi, str):
        if openapi.startswith("3.0"):
            return SpecVersion.OPENAPI_3_0
        if openapi.startswith("3.1"):
            return SpecVersion.OPENAPI_3_1

    return None


def is_version_supported(version: Optional[SpecVersion]) -> bool:
    return version in SUPPORTED_VERSIONS


def create_parser(raw: dict[str, Any]) -> SpecParser:
    """Build the parser for the dialect declared by *raw*.

    Raises:
        UnsupportedSpecError: If :func:`detect_version` finds no dialect.
    """
    version = detect_version(raw)
    if version is None:
        raise UnsupportedSpecError(
            "Unsupported API specification version. "
            "Supported versions: Swagger 2.0, OpenAPI 3.0+"
        )
    return _PARSERS[version](raw)


def parse_spec(raw: dict[str, Any]) -> NormalizedApiSpec:
    """Detect, validate and normalize *raw* in one call.

    Raises:
        UnsupportedSpecError: If no dialect marker matches.
        InvalidSpecError: If the marker matches but ``info`` or ``paths``
            is missing.
    """
    parser = create_parser(raw)
    if not parser.is_valid_spec():
        raise InvalidSpecError(
            f"Invalid {parser.get_version().value} specification: "
            "'info' and 'paths' are required"
        )
    return parser.normalize()


def is_valid_api_spec(raw: Any) -> bool:
    """Return True when *raw* is a supported dialect and passes validation."""
    version = detect_version(raw)
    if version is None:
        return False
    return _PARSERS[version](raw).is_valid_spec()


def get_spec_summary(raw: Any) -> SpecSummary:
    """Summarize a raw document without normalizing it.

    ``spec_version`` is the raw marker value (``"2.0"``, ``"3.0.3"``) and
    ``title`` comes straight from ``info.title`` when present.
    """
    if not isinstance(raw, dict):
        return SpecSummary()

    version = detect_version(raw)
    marker = raw.get("swagger") if "swagger" in raw else raw.get("openapi")
    info = raw.get("info")
    title = info.get("title") if isinstance(info, dict) else None

    return SpecSummary(
        version=version,
        title=str(title) if title is not None else None,
        spec_version=str(marker) if marker is not None else None,
        supported=is_version_supported(version),
    )
