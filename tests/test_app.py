"""CLI tests for the ``generate`` and ``inspect`` commands."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specreport import __version__
from specreport.app import app, configure_logging
from specreport.commands.generate import parse_literal_paths
from specreport.output import OutputFormat, OutputManager

runner = CliRunner()

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SWAGGER = str(FIXTURES_DIR / "petstore_swagger_2.0.json")
OPENAPI = str(FIXTURES_DIR / "bookstore_3.0.json")

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        out = _strip_ansi(result.output)
        assert "generate" in out
        assert "inspect" in out


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerate:
    """Test report generation end to end."""

    def test_writes_report(self, tmp_path: Path) -> None:
        target = tmp_path / "report.json"
        result = runner.invoke(app, ["--plain", "generate", SWAGGER, "-o", str(target)])
        assert result.exit_code == 0, result.output

        document = json.loads(target.read_text(encoding="utf-8"))
        assert document["title"] == "Swagger Petstore"
        assert [g["name"] for g in document["groups"]] == ["Other", "Pets", "Store"]
        assert "Report written to" in result.output
        assert "Pets\t4" in result.output

    def test_default_output_name(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["--quiet", "generate", OPENAPI])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "bookstore-api.json").is_file()

    def test_legacy_shape(self, tmp_path: Path) -> None:
        target = tmp_path / "legacy.json"
        result = runner.invoke(app, ["--quiet", "generate", SWAGGER, "-o", str(target), "--legacy"])
        assert result.exit_code == 0, result.output
        document = json.loads(target.read_text(encoding="utf-8"))
        assert set(document) == {"title", "version", "groups", "definitions"}
        assert document["definitions"]["Pet"]["required"] == ["name"]

    def test_from_literal(self, tmp_path: Path) -> None:
        target = tmp_path / "report.json"
        result = runner.invoke(
            app,
            ["--quiet", "generate", SWAGGER, "-o", str(target), "--from-literal", "/store/*, /health"],
        )
        assert result.exit_code == 0, result.output
        document = json.loads(target.read_text(encoding="utf-8"))
        assert [g["name"] for g in document["groups"]] == ["Other", "Store"]

    def test_from_json(self, tmp_path: Path) -> None:
        config = tmp_path / "filters.json"
        config.write_text(json.dumps({"include": {"tags": ["books"]}}), encoding="utf-8")
        target = tmp_path / "report.json"
        result = runner.invoke(
            app, ["--quiet", "generate", OPENAPI, "-o", str(target), "--from-json", str(config)]
        )
        assert result.exit_code == 0, result.output
        document = json.loads(target.read_text(encoding="utf-8"))
        assert [g["name"] for g in document["groups"]] == ["books"]

    def test_filter_options_mutually_exclusive(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            ["generate", SWAGGER, "--from-json", "f.json", "--from-literal", "/pets"],
        )
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_blank_literal_rejected(self) -> None:
        result = runner.invoke(app, ["generate", SWAGGER, "--from-literal", " , "])
        assert result.exit_code == 2

    def test_no_match_error_exit_code(self, tmp_path: Path) -> None:
        config = tmp_path / "filters.json"
        config.write_text(
            json.dumps({"include": {"tags": ["Nope"]}, "options": {"onNoMatch": "error"}}),
            encoding="utf-8",
        )
        result = runner.invoke(
            app, ["generate", SWAGGER, "-o", str(tmp_path / "r.json"), "--from-json", str(config)]
        )
        assert result.exit_code == 8
        assert "No APIs match the filter criteria" in result.output

    def test_invalid_filter_exit_code(self, tmp_path: Path) -> None:
        config = tmp_path / "filters.json"
        config.write_text(json.dumps({"options": {"strictMatch": True}}), encoding="utf-8")
        result = runner.invoke(app, ["generate", SWAGGER, "--from-json", str(config)])
        assert result.exit_code == 2

    def test_unsupported_spec_exit_code(self, tmp_path: Path) -> None:
        spec = tmp_path / "old.json"
        spec.write_text(json.dumps({"swagger": "1.2", "info": {}, "paths": {}}), encoding="utf-8")
        result = runner.invoke(app, ["generate", str(spec)])
        assert result.exit_code == 7
        assert "Unrecognized API specification format" in result.output

    def test_missing_file_exit_code(self) -> None:
        result = runner.invoke(app, ["generate", "/nonexistent/spec.json"])
        assert result.exit_code == 7

    def test_stdin_input(self, tmp_path: Path, swagger_raw: dict) -> None:
        target = tmp_path / "report.json"
        result = runner.invoke(
            app, ["--quiet", "generate", "-", "-o", str(target)], input=json.dumps(swagger_raw)
        )
        assert result.exit_code == 0, result.output
        assert target.is_file()


class TestParseLiteralPaths:
    def test_splits_and_strips(self) -> None:
        assert parse_literal_paths(" /a , /b/*,,") == ["/a", "/b/*"]


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspect:
    """Test the inspect command."""

    def test_plain_summary(self) -> None:
        result = runner.invoke(app, ["--plain", "inspect", SWAGGER])
        assert result.exit_code == 0, result.output
        assert "Dialect\tswagger-2.0" in result.output
        assert "Title\tSwagger Petstore" in result.output

    def test_json_summary(self) -> None:
        result = runner.invoke(app, ["--json", "inspect", OPENAPI])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data == {
            "version": "openapi-3.0",
            "title": "Bookstore API",
            "spec_version": "3.0.3",
            "supported": True,
        }

    def test_paths_listing(self) -> None:
        result = runner.invoke(app, ["--plain", "inspect", OPENAPI, "--paths"])
        assert result.exit_code == 0, result.output
        assert "TRACE\t/books/{bookId}\tbooks\ttraceBook\t" in result.output
        assert "PUT\t/uploads\tOther\tupload\t" in result.output

    def test_schemas_listing(self) -> None:
        result = runner.invoke(app, ["--plain", "inspect", SWAGGER, "--schemas"])
        assert result.exit_code == 0, result.output
        assert "Pet\tobject\tid, name, category, tags, status" in result.output

    def test_unsupported_document(self, tmp_path: Path) -> None:
        spec = tmp_path / "spec.yaml"
        spec.write_text("openapi: 4.0.0\ninfo:\n  title: Future\n", encoding="utf-8")
        result = runner.invoke(app, ["--plain", "inspect", str(spec)])
        assert result.exit_code == 7
        assert "Supported\tno" in result.output


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Test the level chosen from the output flags."""

    @pytest.mark.parametrize(
        ("kwargs", "level"),
        [({}, logging.INFO), ({"quiet": True}, logging.WARNING), ({"verbose": True}, logging.DEBUG)],
    )
    def test_levels(self, kwargs: dict, level: int) -> None:
        logger = configure_logging(OutputManager(format=OutputFormat.PLAIN, **kwargs))
        assert logger.level == level
        assert len(logger.handlers) == 1

    def test_repeated_calls_keep_one_handler(self) -> None:
        output = OutputManager(format=OutputFormat.PLAIN)
        configure_logging(output)
        logger = configure_logging(output)
        assert len(logger.handlers) == 1
