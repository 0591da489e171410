"""Select a subset of endpoints with declarative include/exclude rules.

The decision for each endpoint does not depend on rule order or on the order
in which endpoints are visited:

1. With an ``include`` side, the endpoint must match at least one include
   rule (an exact ``(method, path)`` selector, a tag, or a path pattern).
2. With an ``exclude`` side, matching any exclude rule removes the endpoint,
   whatever step 1 decided. Exclude always wins.
3. With a non-empty ``operationIds`` list, the endpoint's operation id must
   be in the list.

Path patterns support two wildcards, ``*`` (any run of characters, slashes
included) and ``?`` (exactly one character). Everything else is literal and
the pattern must match the whole path::

    /api/users/*   matches /api/users/123 and /api/users/123/orders
    /api/users/?   matches /api/users/1 but not /api/users/12
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from specreport.exceptions import NoMatchError
from specreport.models import (
    ApiEndpoint,
    ApiFilterConfig,
    ApiGroup,
    FilterResult,
    FilterRules,
    NoMatchPolicy,
    SkippedApi,
)

_RULE_KEYS = ("apis", "tags", "pathPatterns")


def compile_path_pattern(pattern: str, case_sensitive: bool = False) -> re.Pattern[str]:
    """Translate a wildcard path pattern into a regular expression for ``fullmatch``."""
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile("".join(parts), flags)


def matches_path_pattern(path: str, pattern: str, case_sensitive: bool = False) -> bool:
    """Return True when *path* matches the wildcard *pattern* in full."""
    return compile_path_pattern(pattern, case_sensitive).fullmatch(path) is not None


class ApiFilter:
    """Apply an :class:`~specreport.models.ApiFilterConfig` to grouped endpoints.

    Args:
        config: The rule set to apply.
        logger: Receives the no-match warning. Defaults to this module's
            logger.

    Example::

        config = ApiFilterConfig.model_validate({"include": {"tags": ["pets"]}})
        result = ApiFilter(config).apply(legacy.groups)
        print(f"{result.matched}/{result.total}")
    """

    def __init__(
        self, config: ApiFilterConfig, logger: Optional[logging.Logger] = None
    ) -> None:
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    @property
    def _case_sensitive(self) -> bool:
        return self.config.options.case_sensitive

    def apply(self, groups: list[ApiGroup]) -> FilterResult:
        """Filter *groups*, dropping groups left without endpoints.

        Raises:
            NoMatchError: If nothing survives and ``onNoMatch`` is ``error``.
        """
        total = sum(len(group.endpoints) for group in groups)
        skipped: list[SkippedApi] = []
        filtered_groups: list[ApiGroup] = []

        for group in groups:
            kept: list[ApiEndpoint] = []
            for endpoint in group.endpoints:
                reason = self.exclusion_reason(endpoint)
                if reason is None:
                    kept.append(endpoint)
                else:
                    skipped.append(
                        SkippedApi(method=endpoint.method, path=endpoint.path, reason=reason)
                    )
            if kept:
                filtered_groups.append(group.model_copy(update={"endpoints": kept}))

        matched = sum(len(group.endpoints) for group in filtered_groups)
        if matched == 0:
            self._handle_no_match(total)

        return FilterResult(
            matched=matched,
            total=total,
            filtered_groups=filtered_groups,
            skipped_apis=skipped,
        )

    def should_include(self, endpoint: ApiEndpoint) -> bool:
        return self.exclusion_reason(endpoint) is None

    def exclusion_reason(self, endpoint: ApiEndpoint) -> Optional[str]:
        """Return why *endpoint* is excluded, or ``None`` when it is kept."""
        include = self.config.include
        exclude = self.config.exclude

        if include is not None and not self._matches_rules(endpoint, include):
            return "Not in include list"
        if exclude is not None and self._matches_rules(endpoint, exclude):
            return "In exclude list"
        if self.config.operation_ids and not self._matches_operation_id(endpoint):
            return "Not in operationIds list"
        return None

    # ------------------------------------------------------------------ #
    # Matching
    # ------------------------------------------------------------------ #

    def _matches_rules(self, endpoint: ApiEndpoint, rules: FilterRules) -> bool:
        if rules.apis and any(
            self._matches_api(endpoint, api.method, api.path) for api in rules.apis
        ):
            return True
        if rules.tags and any(self._matches_tag(endpoint, tag) for tag in rules.tags):
            return True
        if rules.path_patterns and any(
            matches_path_pattern(endpoint.path, pattern, self._case_sensitive)
            for pattern in rules.path_patterns
        ):
            return True
        return False

    def _matches_api(self, endpoint: ApiEndpoint, method: str, path: str) -> bool:
        if self._case_sensitive:
            if endpoint.method != method.upper():
                return False
        elif endpoint.method.lower() != method.lower():
            return False

        if self.config.options.strict_match:
            return self._equals(endpoint.path, path)
        return matches_path_pattern(endpoint.path, path, self._case_sensitive)

    def _matches_tag(self, endpoint: ApiEndpoint, tag: str) -> bool:
        return self._equals(endpoint.tag, tag)

    def _matches_operation_id(self, endpoint: ApiEndpoint) -> bool:
        if endpoint.operation_id is None:
            return False
        return any(
            self._equals(endpoint.operation_id, operation_id)
            for operation_id in self.config.operation_ids or []
        )

    def _equals(self, left: str, right: str) -> bool:
        if self._case_sensitive:
            return left == right
        return left.lower() == right.lower()

    def _handle_no_match(self, total: int) -> None:
        message = f"No APIs match the filter criteria. Total APIs: {total}"
        policy = self.config.options.on_no_match
        if policy == NoMatchPolicy.ERROR:
            raise NoMatchError(message)
        if policy == NoMatchPolicy.WARN:
            self.logger.warning(message)

    # ------------------------------------------------------------------ #
    # Configuration checks
    # ------------------------------------------------------------------ #

    @staticmethod
    def validate_config(raw: Any) -> bool:
        """Check that *raw* declares at least one way of filtering.

        Accepted are an ``include`` or ``exclude`` side naming at least one
        rule kind (``apis``, ``tags``, ``pathPatterns``), or a non-empty
        ``operationIds`` list. *raw* may be a JSON-shaped dict or an
        :class:`~specreport.models.ApiFilterConfig`.
        """
        if isinstance(raw, ApiFilterConfig):
            raw = raw.model_dump(by_alias=True)
        if not isinstance(raw, dict):
            return False

        try:
            ApiFilterConfig.model_validate(raw)
        except ValidationError:
            return False

        for side in ("include", "exclude"):
            rules = raw.get(side)
            if isinstance(rules, dict) and any(
                _rule_value(rules, key) is not None for key in _RULE_KEYS
            ):
                return True

        operation_ids = raw.get("operationIds", raw.get("operation_ids"))
        return isinstance(operation_ids, list) and len(operation_ids) > 0


def _rule_value(rules: dict[str, Any], key: str) -> Any:
    if key == "pathPatterns":
        return rules.get(key, rules.get("path_patterns"))
    return rules.get(key)
