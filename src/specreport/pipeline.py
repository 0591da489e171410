"""End-to-end pipeline: raw document to grouped, optionally filtered, shape.

:func:`parse_api_spec` is synchronous and does no I/O. The filter
configuration may live in a file or behind a URL, so
:func:`parse_api_spec_with_filter` awaits it first and then hands over::

    legacy = asyncio.run(parse_api_spec_with_filter(raw, "filters.json"))
    report = build_document(legacy)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Union

from specreport.adapter import to_legacy_shape
from specreport.exceptions import FilterConfigError, UnsupportedSpecError
from specreport.filters.engine import ApiFilter
from specreport.filters.loader import build_filter_config, load_filter_config
from specreport.models import ApiFilterConfig, LegacySpec
from specreport.parser.factory import detect_version, parse_spec

DEFAULT_TITLE = "specreport"

FilterInput = Union[str, ApiFilterConfig, dict[str, Any]]


def parse_api_spec(
    raw: Any,
    filter_config: Optional[ApiFilterConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> LegacySpec:
    """Detect, parse, adapt and (optionally) filter *raw*.

    Args:
        raw: The specification document as a dict.
        filter_config: Rules selecting a subset of endpoints.
        logger: Receives progress messages. Defaults to this module's
            logger.

    Returns:
        The grouped shape. With a filter, only surviving groups remain;
        ``definitions`` is never filtered.

    Raises:
        UnsupportedSpecError: If the document declares no supported dialect.
        InvalidSpecError: If ``info`` or ``paths`` is missing.
        NoMatchError: If the filter selects nothing under ``onNoMatch: error``.
    """
    log = logger or logging.getLogger(__name__)

    version = detect_version(raw)
    if version is None:
        raise UnsupportedSpecError(
            "Unrecognized API specification format. Please ensure it is a "
            "valid Swagger 2.0 or OpenAPI 3.0+ specification."
        )
    log.info("Detected API specification version: %s", version.value)

    legacy = to_legacy_shape(parse_spec(raw))
    if filter_config is None:
        return legacy

    log.info("Applying API filter...")
    result = ApiFilter(filter_config, logger=log).apply(legacy.groups)
    log.info("Filter results: %d/%d APIs", result.matched, result.total)
    if result.skipped_apis:
        log.info("Skipped APIs: %d", len(result.skipped_apis))
        for skipped in result.skipped_apis:
            log.debug("Skipped %s %s: %s", skipped.method, skipped.path, skipped.reason)

    return legacy.model_copy(update={"groups": result.filtered_groups})


async def parse_api_spec_with_filter(
    raw: Any,
    filter_input: Optional[FilterInput] = None,
    logger: Optional[logging.Logger] = None,
) -> LegacySpec:
    """Resolve *filter_input* into a validated configuration, then run the pipeline.

    Args:
        raw: The specification document as a dict.
        filter_input: A file path or URL (loaded asynchronously), a
            JSON-shaped dict, or a ready :class:`ApiFilterConfig`.
        logger: Passed through to :func:`parse_api_spec`.

    Raises:
        FilterConfigError: If the configuration cannot be loaded, or
            declares no include, exclude, or operationIds rule.
    """
    log = logger or logging.getLogger(__name__)
    config: Optional[ApiFilterConfig] = None

    if filter_input is not None:
        if isinstance(filter_input, str):
            log.info("Loading filter configuration: %s", filter_input)
            config = await load_filter_config(filter_input)
        elif isinstance(filter_input, dict):
            config = build_filter_config(filter_input)
        else:
            log.info("Using in-memory filter configuration")
            config = filter_input

        if not ApiFilter.validate_config(config):
            raise FilterConfigError("Invalid filter configuration format")

    return parse_api_spec(raw, config, logger=log)


def default_output_name(title: Optional[str], suffix: str = ".json") -> str:
    """Derive a report file name from the API title.

    Example::

        >>> default_output_name("Swagger Petstore (v2)")
        'swagger-petstore-v2.json'
    """
    name = title or DEFAULT_TITLE
    name = re.sub(r"[^\w\s.-]", "", name, flags=re.ASCII)
    name = re.sub(r"\s+", "-", name).lower()
    return f"{name}{suffix}"
