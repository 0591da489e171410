"""Tests for specreport.filters.loader."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from specreport.exceptions import FilterConfigError
from specreport.filters.loader import build_filter_config, load_filter_config
from specreport.models import NoMatchPolicy

REAL_ASYNC_CLIENT = httpx.AsyncClient


def _client_factory(handler):
    """Return an AsyncClient replacement that answers through *handler*."""

    def factory(**kwargs):
        return REAL_ASYNC_CLIENT(transport=httpx.MockTransport(handler), **kwargs)

    return factory


class TestLoadFromFile:
    """Test loading configurations from local files."""

    def test_json_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "filters.json"
        config_file.write_text(
            json.dumps({"include": {"tags": ["Pets"]}, "options": {"onNoMatch": "error"}}),
            encoding="utf-8",
        )
        config = asyncio.run(load_filter_config(str(config_file)))
        assert config.include is not None
        assert config.include.tags == ["Pets"]
        assert config.options.on_no_match == NoMatchPolicy.ERROR

    def test_yaml_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "filters.yaml"
        config_file.write_text(
            "exclude:\n  pathPatterns:\n    - /internal/*\noperationIds: [listPets]\n",
            encoding="utf-8",
        )
        config = asyncio.run(load_filter_config(str(config_file)))
        assert config.exclude is not None
        assert config.exclude.path_patterns == ["/internal/*"]
        assert config.operation_ids == ["listPets"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FilterConfigError, match="not found"):
            asyncio.run(load_filter_config(str(tmp_path / "nope.json")))

    def test_unparseable_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "filters.json"
        config_file.write_text("{broken", encoding="utf-8")
        with pytest.raises(FilterConfigError, match="Invalid filter configuration"):
            asyncio.run(load_filter_config(str(config_file)))

    def test_wrong_shape(self, tmp_path: Path) -> None:
        config_file = tmp_path / "filters.json"
        config_file.write_text(json.dumps({"options": {"onNoMatch": "explode"}}), encoding="utf-8")
        with pytest.raises(FilterConfigError) as exc_info:
            asyncio.run(load_filter_config(str(config_file)))
        assert exc_info.value.exit_code == 2


class TestLoadFromUrl:
    """Test fetching configurations over HTTP."""

    def test_fetches_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/filters.json"
            return httpx.Response(200, json={"include": {"pathPatterns": ["/pets*"]}})

        with patch("specreport.filters.loader.httpx.AsyncClient", _client_factory(handler)):
            config = asyncio.run(load_filter_config("https://example.com/filters.json"))
        assert config.include is not None
        assert config.include.path_patterns == ["/pets*"]

    def test_http_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        with patch("specreport.filters.loader.httpx.AsyncClient", _client_factory(handler)):
            with pytest.raises(FilterConfigError, match="HTTP 500"):
                asyncio.run(load_filter_config("https://example.com/filters.json"))

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with patch("specreport.filters.loader.httpx.AsyncClient", _client_factory(handler)):
            with pytest.raises(FilterConfigError, match="Failed to fetch"):
                asyncio.run(load_filter_config("http://unreachable.example.com/f.json"))


class TestBuildFilterConfig:
    def test_accepts_snake_case(self) -> None:
        config = build_filter_config({"operation_ids": ["a"], "options": {"strict_match": True}})
        assert config.operation_ids == ["a"]
        assert config.options.strict_match is True

    def test_rejects_bad_selector(self) -> None:
        with pytest.raises(FilterConfigError, match="<memory>"):
            build_filter_config({"include": {"apis": [{"method": "GET"}]}})
