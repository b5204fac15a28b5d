"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
Known error classes map onto the BSD ``sysexits.h`` values so that
scripts can tell a typo from an outage.
"""

from __future__ import annotations

from anytype_cli.exceptions import (
    AmbiguousIdentifierError,
    AnytypeCliError,
    AuthError,
    AuthenticationFailedError,
    ConfigError,
    NotAuthenticatedError,
    NotFoundError,
    TransportError,
    ValidationError,
)

SUCCESS: int = 0
"""Clean exit — command completed without error."""

GENERAL_ERROR: int = 1
"""A known AnytypeCliError was caught. User-facing message was displayed."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

USAGE: int = 64
"""Ambiguous identifier or rejected parameters (``EX_USAGE``)."""

NO_INPUT: int = 66
"""The requested entity does not exist (``EX_NOINPUT``)."""

UNAVAILABLE: int = 69
"""The API could not be reached (``EX_UNAVAILABLE``)."""

NO_PERMISSION: int = 77
"""Missing or rejected credentials (``EX_NOPERM``)."""

CONFIG: int = 78
"""Unreadable or unwritable configuration (``EX_CONFIG``)."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

_BY_ERROR: tuple[tuple[type[AnytypeCliError], int], ...] = (
    (AmbiguousIdentifierError, USAGE),
    (ValidationError, USAGE),
    (NotFoundError, NO_INPUT),
    (TransportError, UNAVAILABLE),
    (AuthError, NO_PERMISSION),
    (NotAuthenticatedError, NO_PERMISSION),
    (AuthenticationFailedError, NO_PERMISSION),
    (ConfigError, CONFIG),
)


def exit_code_for(exc: AnytypeCliError) -> int:
    """Return the process exit code for a known error."""
    for error_class, code in _BY_ERROR:
        if isinstance(exc, error_class):
            return code
    return GENERAL_ERROR
