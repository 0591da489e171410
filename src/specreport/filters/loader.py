"""Load a filter configuration from a local file or an http(s) URL.

This is the only asynchronous boundary in specreport. The pipeline awaits
:func:`load_filter_config` once, before any parsing starts. Files are read
in a worker thread and URLs are fetched with :class:`httpx.AsyncClient`.
Documents may be JSON or YAML, using the same detection as specification
documents.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
from pydantic import ValidationError

from specreport.exceptions import FilterConfigError, SpecParseError
from specreport.models import ApiFilterConfig
from specreport.parser.loader import HTTP_TIMEOUT, content_type_hint, parse_content, suffix_hint


async def load_filter_config(source: str) -> ApiFilterConfig:
    """Read and validate the filter configuration at *source*.

    Args:
        source: A file path or an ``http://``/``https://`` URL.

    Returns:
        The validated configuration.

    Raises:
        FilterConfigError: If the document cannot be fetched or parsed, or
            does not fit the :class:`~specreport.models.ApiFilterConfig`
            shape.
    """
    if source.startswith(("http://", "https://")):
        content, hint = await _fetch(source)
    else:
        content, hint = await _read(source)

    try:
        raw = parse_content(content, hint=hint)
    except SpecParseError as exc:
        raise FilterConfigError(f"Invalid filter configuration {source}: {exc}") from exc

    return build_filter_config(raw, source)


def build_filter_config(raw: dict, source: str = "<memory>") -> ApiFilterConfig:
    """Validate a JSON-shaped dict into an :class:`ApiFilterConfig`."""
    try:
        return ApiFilterConfig.model_validate(raw)
    except ValidationError as exc:
        raise FilterConfigError(f"Invalid filter configuration {source}: {exc}") from exc


async def _read(path: str) -> tuple[str, str]:
    file_path = Path(path)
    if not file_path.is_file():
        raise FilterConfigError(f"Filter configuration not found: {path}")
    try:
        content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
    except OSError as exc:
        raise FilterConfigError(f"Failed to read filter configuration {path}: {exc}") from exc
    return content, suffix_hint(file_path)


async def _fetch(url: str) -> tuple[str, str]:
    try:
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FilterConfigError(
            f"HTTP {exc.response.status_code} fetching filter configuration from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise FilterConfigError(
            f"Failed to fetch filter configuration from {url}: {exc}"
        ) from exc
    return response.text, content_type_hint(response)
