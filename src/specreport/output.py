"""Console rendering for the ``generate`` and ``inspect`` commands.

Report data (summaries, endpoint and schema listings) is written to stdout;
status lines, warnings and errors go to stderr so that ``--json`` output can
be piped straight into another tool.

Three formats are supported:

* ``RICH`` -- styled tables, chosen automatically on an interactive terminal.
* ``PLAIN`` -- tab-separated lines with a header row, one record per line.
* ``JSON`` -- one JSON document per call.

``NO_COLOR`` (any value), ``TERM=dumb`` and ``--no-color`` all disable
colour, which also makes ``AUTO`` fall back to ``PLAIN``.

The CLI callback builds one :class:`OutputManager` and installs it with
:func:`set_output`; commands fetch it back with :func:`get_output` or use the
:func:`error`, :func:`warning` and :func:`success` shortcuts.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from specreport.expansion import format_schema
from specreport.models import LegacySpec, NormalizedSchema, SpecSummary

#: Property names listed per schema before the listing is cut short.
MAX_LISTED_PROPERTIES = 5

_METHOD_STYLES = {
    "GET": "green",
    "POST": "yellow",
    "PUT": "blue",
    "PATCH": "cyan",
    "DELETE": "red",
}


class OutputFormat(str, Enum):
    """How report data is printed.

    ``AUTO`` becomes ``RICH`` on a colour-capable terminal and ``PLAIN``
    everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Route report data to stdout and diagnostics to stderr.

    Args:
        format: Requested format; ``AUTO`` is resolved once, here.
        no_color: Disable colour even on a terminal.
        quiet: Drop ``info`` and ``success`` lines.
        verbose: Only consulted by the CLI to pick the log level.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            self._format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def no_color(self) -> bool:
        return self._no_color

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    @property
    def stderr_console(self) -> Console:
        """The diagnostics console, shared with the log handler."""
        return self._stderr

    # ------------------------------------------------------------------ #
    # Report data (stdout)
    # ------------------------------------------------------------------ #

    def print_spec_summary(self, summary: SpecSummary) -> None:
        """Print what ``inspect`` detected about a document.

        JSON mode prints the summary model as is; the other formats show a
        two-column Field/Value table with ``-`` for unknown values.
        """
        if self._format == OutputFormat.JSON:
            self._write_json(summary.model_dump(mode="json"))
            return
        self.print_table(
            ["Field", "Value"],
            [
                ["Dialect", summary.version.value if summary.version else "-"],
                ["Spec version", summary.spec_version or "-"],
                ["Title", summary.title or "-"],
                ["Supported", "yes" if summary.supported else "no"],
            ],
            title="Specification",
        )

    def print_group_counts(self, spec: LegacySpec) -> None:
        """Print the number of endpoints in each tag group."""
        rows = [[group.name, str(len(group.endpoints))] for group in spec.groups]
        total = sum(len(group.endpoints) for group in spec.groups)
        self.print_table(
            ["Group", "Endpoints"],
            rows,
            title=f"{spec.title} {spec.version} -- {total} endpoints",
        )

    def print_endpoints(self, spec: LegacySpec) -> None:
        """List every endpoint of *spec* in group order.

        In rich mode the method is coloured by verb and deprecated endpoints
        are struck through.
        """
        headers = ["Method", "Path", "Tag", "Operation ID", "Deprecated"]
        rows = [
            [
                endpoint.method,
                endpoint.path,
                group.name,
                endpoint.operation_id or "-",
                "Yes" if endpoint.deprecated else "",
            ]
            for group in spec.groups
            for endpoint in group.endpoints
        ]
        title = f"Paths ({len(rows)})"
        if self._format != OutputFormat.RICH:
            self.print_table(headers, rows, title=title)
            return

        table = _rich_table(headers, title)
        for row in rows:
            method = row[0]
            style = "strike dim" if row[4] else None
            table.add_row(
                f"[{_METHOD_STYLES.get(method, 'white')}]{method}[/]", *row[1:], style=style
            )
        self._stdout.print(table)

    def print_schemas(self, schemas: dict[str, NormalizedSchema]) -> None:
        """List the named schemas alphabetically with their first properties."""
        rows = []
        for name, schema in sorted(schemas.items()):
            prop_names = list((schema.properties or {}).keys())
            props = ", ".join(prop_names[:MAX_LISTED_PROPERTIES])
            if len(prop_names) > MAX_LISTED_PROPERTIES:
                props += "..."
            rows.append([name, format_schema(schema), props])
        self.print_table(["Schema", "Type", "Properties"], rows, title=f"Schemas ({len(rows)})")

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print *rows* under *headers*.

        JSON mode emits a list of objects keyed by header; *title* is only
        shown in rich mode.
        """
        if self._format == OutputFormat.JSON:
            self._write_json([dict(zip(headers, row)) for row in rows])
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self._write("\t".join(line))
        else:
            table = _rich_table(headers, title)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def _write(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def _write_json(self, data: Any) -> None:
        self._write(json.dumps(data, indent=2, ensure_ascii=False))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diagnostic(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)


def _rich_table(headers: list[str], title: Optional[str]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for header in headers:
        table.add_column(header)
    return table


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (even empty) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide manager
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def error(message: str) -> None:
    get_output().error(message)


def warning(message: str) -> None:
    get_output().warning(message)


def success(message: str) -> None:
    get_output().success(message)
