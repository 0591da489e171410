"""Generate command -- write the report document for a specification.

The document is the expanded :class:`~specreport.models.ReportDocument`
serialized as JSON, ready for a renderer. ``--legacy`` writes the grouped
shape with un-expanded schemas instead.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer

from specreport.adapter import to_legacy_dict
from specreport.exceptions import SpecReportError
from specreport.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE
from specreport.models import ApiFilterConfig
from specreport.output import error, get_output, success
from specreport.parser.loader import load_spec
from specreport.pipeline import default_output_name, parse_api_spec_with_filter
from specreport.tables import build_document


def parse_literal_paths(value: str) -> list[str]:
    """Split a ``--from-literal`` value on commas, dropping blanks."""
    return [path.strip() for path in value.split(",") if path.strip()]


def generate_command(
    source: str = typer.Argument(
        ..., metavar="INPUT", help="Spec file path, URL, or '-' for stdin."
    ),
    output_path: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Report file (default: derived from the API title)."
    ),
    from_json: Optional[str] = typer.Option(
        None, "--from-json", help="Filter configuration file or URL (JSON or YAML)."
    ),
    from_literal: Optional[str] = typer.Option(
        None, "--from-literal", help="Comma-separated path patterns to include."
    ),
    legacy: bool = typer.Option(
        False, "--legacy", help="Write the grouped shape without expanded tables."
    ),
) -> None:
    """Build the report document for INPUT.

    Example::

        specreport generate petstore.json
        specreport generate petstore.yaml -o report.json --from-literal "/pets/*,/store/*"
        specreport generate https://example.com/openapi.json --from-json filters.json
    """
    if from_json and from_literal:
        error("--from-json and --from-literal are mutually exclusive")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    filter_input: Optional[str | ApiFilterConfig] = None
    if from_json:
        filter_input = from_json
    elif from_literal is not None:
        paths = parse_literal_paths(from_literal)
        if not paths:
            error("--from-literal needs at least one path")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        filter_input = ApiFilterConfig.from_literal(paths)

    try:
        raw = load_spec(source)
        spec = asyncio.run(
            parse_api_spec_with_filter(
                raw, filter_input, logger=logging.getLogger("specreport")
            )
        )
    except SpecReportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if legacy:
        document: dict[str, Any] = to_legacy_dict(spec)
    else:
        document = build_document(spec).model_dump(mode="json")

    target = output_path or Path(default_output_name(spec.title))
    try:
        target.write_text(
            json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
    except OSError as exc:
        error(f"Failed to write report {target}: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None

    get_output().print_group_counts(spec)
    success(f"Report written to {target}")

