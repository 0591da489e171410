"""Endpoint selection -- rule evaluation and filter configuration loading.

* :mod:`~specreport.filters.engine` -- :class:`ApiFilter` and the wildcard
  path matcher.
* :mod:`~specreport.filters.loader` -- async loading of a filter
  configuration from a file or URL.
"""

from specreport.filters.engine import ApiFilter, matches_path_pattern
from specreport.filters.loader import build_filter_config, load_filter_config

__all__ = ["ApiFilter", "build_filter_config", "load_filter_config", "matches_path_pattern"]
