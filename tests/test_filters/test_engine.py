"""Tests for specreport.filters.engine."""

from __future__ import annotations

import logging

import pytest

from specreport.exceptions import NoMatchError
from specreport.filters.engine import ApiFilter, matches_path_pattern
from specreport.models import ApiEndpoint, ApiFilterConfig, ApiGroup, LegacySpec

TEST_LOGGER = "tests.filters"


def _config(data: dict) -> ApiFilterConfig:
    return ApiFilterConfig.model_validate(data)


def _endpoint(method: str, path: str, tag: str = "Users", operation_id: str | None = None) -> ApiEndpoint:
    return ApiEndpoint(
        method=method,
        path=path,
        tag=tag,
        operation_id=operation_id,
        summary="s",
        description="d",
    )


def _kept(result) -> set[tuple[str, str]]:
    return {(e.method, e.path) for g in result.filtered_groups for e in g.endpoints}


# ---------------------------------------------------------------------------
# Wildcard paths
# ---------------------------------------------------------------------------


class TestMatchesPathPattern:
    """Test wildcard path matching."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/api/users/123", True),
            ("/api/users/123/orders", True),
            ("/api/users/", True),
            ("/api/user", False),
            ("/v2/api/users/1", False),
        ],
    )
    def test_star_spans_segments(self, path: str, expected: bool) -> None:
        assert matches_path_pattern(path, "/api/users/*") is expected

    @pytest.mark.parametrize(
        ("path", "expected"),
        [("/api/users/1", True), ("/api/users/12", False), ("/api/users/", False)],
    )
    def test_question_mark_is_one_character(self, path: str, expected: bool) -> None:
        assert matches_path_pattern(path, "/api/users/?") is expected

    def test_regex_metacharacters_are_literal(self) -> None:
        assert matches_path_pattern("/a.b/{id}", "/a.b/{id}") is True
        assert matches_path_pattern("/aXb/{id}", "/a.b/{id}") is False
        assert matches_path_pattern("/v1+2", "/v1+2") is True

    def test_case_folding(self) -> None:
        assert matches_path_pattern("/API/Users", "/api/users") is True
        assert matches_path_pattern("/API/Users", "/api/users", case_sensitive=True) is False

    def test_trailing_newline_not_matched(self) -> None:
        assert matches_path_pattern("/pets\n", "/pets") is False


# ---------------------------------------------------------------------------
# Rule evaluation
# ---------------------------------------------------------------------------


class TestApply:
    """Test include, exclude and operationIds evaluation."""

    def test_include_tag(self, swagger_legacy: LegacySpec) -> None:
        result = ApiFilter(_config({"include": {"tags": ["pets"]}})).apply(swagger_legacy.groups)
        assert result.matched == 4
        assert result.total == 6
        assert [g.name for g in result.filtered_groups] == ["Pets"]
        assert {s.reason for s in result.skipped_apis} == {"Not in include list"}

    def test_exclude_wins_over_include(self, swagger_legacy: LegacySpec) -> None:
        config = _config(
            {
                "include": {"tags": ["Pets"]},
                "exclude": {"apis": [{"method": "delete", "path": "/pets/*"}]},
            }
        )
        result = ApiFilter(config).apply(swagger_legacy.groups)
        assert ("DELETE", "/pets/{petId}") not in _kept(result)
        assert result.matched == 3
        reasons = {(s.method, s.reason) for s in result.skipped_apis}
        assert ("DELETE", "In exclude list") in reasons

    def test_exclude_only(self, swagger_legacy: LegacySpec) -> None:
        config = _config({"exclude": {"pathPatterns": ["/pets*"]}})
        result = ApiFilter(config).apply(swagger_legacy.groups)
        assert _kept(result) == {("POST", "/store/order"), ("GET", "/health")}

    def test_include_rule_kinds_are_alternatives(self, swagger_legacy: LegacySpec) -> None:
        config = _config(
            {
                "include": {
                    "apis": [{"method": "GET", "path": "/health"}],
                    "tags": ["Store"],
                }
            }
        )
        result = ApiFilter(config).apply(swagger_legacy.groups)
        assert _kept(result) == {("GET", "/health"), ("POST", "/store/order")}

    def test_operation_ids(self, swagger_legacy: LegacySpec) -> None:
        config = _config({"operationIds": ["listPets", "PLACEORDER"]})
        result = ApiFilter(config).apply(swagger_legacy.groups)
        assert _kept(result) == {("GET", "/pets"), ("POST", "/store/order")}
        assert "Not in operationIds list" in {s.reason for s in result.skipped_apis}

    def test_operation_ids_combined_with_include(self, swagger_legacy: LegacySpec) -> None:
        config = _config({"include": {"tags": ["Pets"]}, "operationIds": ["placeOrder", "addPet"]})
        result = ApiFilter(config).apply(swagger_legacy.groups)
        assert _kept(result) == {("POST", "/pets")}

    def test_empty_operation_ids_ignored(self, swagger_legacy: LegacySpec) -> None:
        config = _config({"include": {"tags": ["Store"]}, "operationIds": []})
        assert ApiFilter(config).apply(swagger_legacy.groups).matched == 1

    def test_result_independent_of_rule_order(self, swagger_legacy: LegacySpec) -> None:
        forward = _config({"include": {"pathPatterns": ["/health", "/store/*"]}})
        backward = _config({"include": {"pathPatterns": ["/store/*", "/health"]}})
        assert _kept(ApiFilter(forward).apply(swagger_legacy.groups)) == _kept(
            ApiFilter(backward).apply(swagger_legacy.groups)
        )

    def test_input_groups_not_mutated(self, swagger_legacy: LegacySpec) -> None:
        ApiFilter(_config({"include": {"tags": ["Store"]}})).apply(swagger_legacy.groups)
        assert sum(len(g.endpoints) for g in swagger_legacy.groups) == 6


class TestMatchingOptions:
    """Test strictMatch and caseSensitive."""

    def _groups(self) -> list[ApiGroup]:
        return [
            ApiGroup(
                name="Users",
                endpoints=[
                    _endpoint("GET", "/api/users/*"),
                    _endpoint("GET", "/api/users/42"),
                    _endpoint("GET", "/API/Users"),
                ],
            )
        ]

    def test_strict_match_compares_literally(self) -> None:
        config = _config(
            {
                "include": {"apis": [{"method": "GET", "path": "/api/users/*"}]},
                "options": {"strictMatch": True},
            }
        )
        assert _kept(ApiFilter(config).apply(self._groups())) == {("GET", "/api/users/*")}

    def test_wildcard_selector_without_strict(self) -> None:
        config = _config({"include": {"apis": [{"method": "get", "path": "/api/users/*"}]}})
        assert _kept(ApiFilter(config).apply(self._groups())) == {
            ("GET", "/api/users/*"),
            ("GET", "/api/users/42"),
        }

    def test_case_sensitive_paths(self) -> None:
        config = _config(
            {"include": {"pathPatterns": ["/api/users"]}, "options": {"caseSensitive": True}}
        )
        result = ApiFilter(config, logger=logging.getLogger(TEST_LOGGER)).apply(self._groups())
        assert result.matched == 0

    def test_case_sensitive_method_is_uppercased(self) -> None:
        config = _config(
            {
                "include": {"apis": [{"method": "get", "path": "/api/users/42"}]},
                "options": {"caseSensitive": True},
            }
        )
        assert _kept(ApiFilter(config).apply(self._groups())) == {("GET", "/api/users/42")}

    def test_case_sensitive_tags(self) -> None:
        config = _config({"include": {"tags": ["users"]}, "options": {"caseSensitive": True}})
        result = ApiFilter(config, logger=logging.getLogger(TEST_LOGGER)).apply(self._groups())
        assert result.matched == 0

    def test_should_include(self) -> None:
        api_filter = ApiFilter(_config({"exclude": {"tags": ["Users"]}}))
        assert api_filter.should_include(_endpoint("GET", "/x")) is False
        assert api_filter.should_include(_endpoint("GET", "/x", tag="Other")) is True


# ---------------------------------------------------------------------------
# No-match policies
# ---------------------------------------------------------------------------


class TestNoMatch:
    """Test the onNoMatch policies."""

    _NOTHING = {"include": {"tags": ["Missing"]}}

    def test_error_raises(self, swagger_legacy: LegacySpec) -> None:
        config = _config({**self._NOTHING, "options": {"onNoMatch": "error"}})
        with pytest.raises(NoMatchError, match="Total APIs: 6") as exc_info:
            ApiFilter(config).apply(swagger_legacy.groups)
        assert exc_info.value.exit_code == 8

    def test_warn_logs_and_returns_empty(
        self, swagger_legacy: LegacySpec, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = _config(self._NOTHING)
        with caplog.at_level(logging.WARNING, logger=TEST_LOGGER):
            result = ApiFilter(config, logger=logging.getLogger(TEST_LOGGER)).apply(
                swagger_legacy.groups
            )
        assert result.filtered_groups == []
        assert result.matched == 0
        assert "No APIs match the filter criteria" in caplog.text

    def test_empty_is_silent(
        self, swagger_legacy: LegacySpec, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = _config({**self._NOTHING, "options": {"onNoMatch": "empty"}})
        with caplog.at_level(logging.WARNING, logger=TEST_LOGGER):
            result = ApiFilter(config, logger=logging.getLogger(TEST_LOGGER)).apply(
                swagger_legacy.groups
            )
        assert result.matched == 0
        assert caplog.records == []


# ---------------------------------------------------------------------------
# Configuration validation
# ---------------------------------------------------------------------------


class TestValidateConfig:
    """Test the minimum-content check."""

    @pytest.mark.parametrize(
        "raw",
        [
            {"include": {"tags": ["a"]}},
            {"exclude": {"pathPatterns": ["/x"]}},
            {"include": {"path_patterns": ["/x"]}},
            {"include": {"apis": []}},
            {"operationIds": ["listPets"]},
        ],
    )
    def test_accepted(self, raw: dict) -> None:
        assert ApiFilter.validate_config(raw) is True

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            {"include": {}},
            {"operationIds": []},
            {"options": {"strictMatch": True}},
            {"include": {"tags": "not-a-list"}},
            "include",
            None,
        ],
    )
    def test_rejected(self, raw: object) -> None:
        assert ApiFilter.validate_config(raw) is False

    def test_accepts_model_instance(self) -> None:
        assert ApiFilter.validate_config(ApiFilterConfig.from_literal(["/pets"])) is True
        assert ApiFilter.validate_config(ApiFilterConfig()) is False
