"""Specification parser -- load, detect the dialect, and normalize.

This sub-package is responsible for the first half of the specreport
pipeline: turning a raw Swagger 2.0 or OpenAPI 3.x document (JSON or YAML,
local file or remote URL) into a :class:`~specreport.models.NormalizedApiSpec`
that the adapter can consume.

Typical usage::

    from specreport.parser import load_spec, parse_spec

    raw = load_spec("https://petstore.swagger.io/v2/swagger.json")
    spec = parse_spec(raw)

Sub-modules:

* :mod:`~specreport.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection.
* :mod:`~specreport.parser.factory` -- Version detection and parser
  selection.
* :mod:`~specreport.parser.base`, :mod:`~specreport.parser.swagger_v2`,
  :mod:`~specreport.parser.openapi_v3` -- The dialect parsers.
* :mod:`~specreport.parser.normalizer` -- Schema normalization per dialect.
* :mod:`~specreport.parser.resolver` -- ``$ref`` lookup for reusable
  parameters, request bodies, and responses.
"""

from specreport.parser.factory import (
    SUPPORTED_VERSIONS,
    create_parser,
    detect_version,
    get_spec_summary,
    is_valid_api_spec,
    is_version_supported,
    parse_spec,
)
from specreport.parser.loader import load_spec

__all__ = [
    "SUPPORTED_VERSIONS",
    "create_parser",
    "detect_version",
    "get_spec_summary",
    "is_valid_api_spec",
    "is_version_supported",
    "load_spec",
    "parse_spec",
]
