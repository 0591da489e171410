"""Shared test fixtures for specreport.

Provides reusable fixtures for loading spec fixtures, building the
normalized and grouped shapes, managing output state, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from specreport.adapter import to_legacy_shape
from specreport.models import LegacySpec, NormalizedApiSpec
from specreport.output import OutputFormat, OutputManager, reset_output, set_output
from specreport.parser.factory import parse_spec


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Undo the handler and propagation changes made by the CLI callback."""
    yield
    logger = logging.getLogger("specreport")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore dict."""
    with open(FIXTURES_DIR / "petstore_swagger_2.0.json") as f:
        return json.load(f)


@pytest.fixture
def openapi_raw() -> dict[str, Any]:
    """Load the raw OpenAPI 3.0 bookstore dict."""
    with open(FIXTURES_DIR / "bookstore_3.0.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Parsed spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger_spec(swagger_raw: dict[str, Any]) -> NormalizedApiSpec:
    return parse_spec(swagger_raw)


@pytest.fixture
def openapi_spec(openapi_raw: dict[str, Any]) -> NormalizedApiSpec:
    return parse_spec(openapi_raw)


@pytest.fixture
def swagger_legacy(swagger_spec: NormalizedApiSpec) -> LegacySpec:
    """Grouped shape of the Swagger 2.0 petstore."""
    return to_legacy_shape(swagger_spec)


@pytest.fixture
def openapi_legacy(openapi_spec: NormalizedApiSpec) -> LegacySpec:
    """Grouped shape of the OpenAPI 3.0 bookstore."""
    return to_legacy_shape(openapi_spec)


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Set up JSON output for tests that check JSON-formatted output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
