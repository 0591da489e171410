"""Exception hierarchy for specreport.

All exceptions inherit from :class:`SpecReportError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specreport.exit_codes`.
The CLI catches ``SpecReportError`` and exits with the appropriate code,
while unexpected exceptions produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

Only fatal conditions are modelled here. Unresolvable schema references and
missing optional metadata are absorbed by the pipeline and surface as
placeholder rows or defaulted text instead.

Subclass hierarchy::

    SpecReportError (exit 1)
    +-- SpecParseError        (exit 7)
    |   +-- UnsupportedSpecError (exit 7)
    |   +-- InvalidSpecError     (exit 7)
    +-- FilterConfigError     (exit 2)
    +-- NoMatchError          (exit 8)
"""

from specreport.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NO_MATCH,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecReportError(Exception):
    """Base exception for all specreport errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specreport.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class SpecParseError(SpecReportError):
    """Raised when the specification document cannot be read or parsed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnsupportedSpecError(SpecParseError):
    """Raised when neither the ``swagger`` nor the ``openapi`` marker selects a supported dialect."""


class InvalidSpecError(SpecParseError):
    """Raised when the dialect marker matches but ``info`` or ``paths`` is missing."""


class FilterConfigError(SpecReportError):
    """Raised for filter configurations that cannot be loaded or fail validation."""

    exit_code = EXIT_INVALID_USAGE


class NoMatchError(SpecReportError):
    """Raised when a filter selects zero operations under ``onNoMatch: error``."""

    exit_code = EXIT_NO_MATCH
