"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specreport.exceptions.SpecReportError` subclass.
CI scripts can inspect the exit code to tell a bad document apart from a
bad filter configuration without parsing stderr.

Example::

    $ specreport generate swagger.json --from-json filters.json
    $ echo $?
    8   # EXIT_NO_MATCH -- the filter selected no operations
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an invalid filter configuration."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API specification could not be loaded, recognised, or validated."""

EXIT_NO_MATCH = 8
"""The filter matched no operations and ``onNoMatch`` is ``error``."""
