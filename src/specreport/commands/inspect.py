"""Inspect command -- examine a specification without generating a report.

Prints the detected dialect summary. ``--paths`` adds the endpoint list and
``--schemas`` the definitions, both taken from the normalized document.
"""

from __future__ import annotations

import typer

from specreport.adapter import to_legacy_shape
from specreport.exceptions import SpecReportError
from specreport.exit_codes import EXIT_SPEC_PARSE_ERROR
from specreport.output import error, get_output, warning
from specreport.parser.factory import get_spec_summary, parse_spec
from specreport.parser.loader import load_spec


def inspect_command(
    source: str = typer.Argument(
        ..., metavar="INPUT", help="Spec file path, URL, or '-' for stdin."
    ),
    paths: bool = typer.Option(False, "--paths", help="List every endpoint."),
    schemas: bool = typer.Option(False, "--schemas", help="List every definition."),
) -> None:
    """Show the dialect, title, and version of INPUT.

    Example::

        specreport inspect petstore.json
        specreport --json inspect petstore.json
        specreport inspect openapi.yaml --paths
    """
    try:
        raw = load_spec(source)
    except SpecReportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output = get_output()
    summary = get_spec_summary(raw)
    output.print_spec_summary(summary)

    if not summary.supported:
        warning("Supported versions: Swagger 2.0, OpenAPI 3.0+")
        raise typer.Exit(code=EXIT_SPEC_PARSE_ERROR)

    if not (paths or schemas):
        return

    try:
        normalized = parse_spec(raw)
    except SpecReportError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if paths:
        output.print_endpoints(to_legacy_shape(normalized))
    if schemas:
        output.print_schemas(normalized.schemas)
