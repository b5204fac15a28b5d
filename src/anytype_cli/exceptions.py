"""Custom exception hierarchy for anytype-cli.

All exceptions that cross layer boundaries must inherit from
:class:`AnytypeCliError`.  Raw third-party exceptions (e.g. from
``requests`` or PyYAML) must NEVER propagate beyond the layer that
talks to the library — they are caught there and re-raised as a typed
subclass defined here.

Hierarchy
---------
AnytypeCliError
├── ConfigError
├── NotAuthenticatedError
├── AuthenticationFailedError
├── AmbiguousIdentifierError
├── EnvironmentError
└── BackendError
    ├── TransportError
    ├── AuthError
    ├── NotFoundError
    └── ValidationError

:class:`MalformedTableError` is deliberately *outside* the hierarchy: it
signals a programming error (a row whose cell count differs from the
header count), not a condition the user can fix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from anytype_cli.core.models import Ambiguous


class AnytypeCliError(Exception):
    """Base exception for all anytype-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration / authentication ----------------------------------------

class ConfigError(AnytypeCliError):
    """Raised when the configuration file cannot be read or written."""


class NotAuthenticatedError(AnytypeCliError):
    """Raised when a command needs credentials that are not configured."""

    def __init__(self, message: str = "You are not authenticated.") -> None:
        super().__init__(message, hint="Run 'anytype-cli auth' first.")


class AuthenticationFailedError(AnytypeCliError):
    """Raised when the interactive challenge/code flow does not complete."""


# --- Identifier resolution --------------------------------------------------

class AmbiguousIdentifierError(AnytypeCliError):
    """Raised when a human-supplied identifier matches several entities.

    The CLI never auto-picks a "best" match; the capped candidate list is
    part of the message and the user is asked to be more specific.
    """

    def __init__(self, message: str, *, outcome: Ambiguous) -> None:
        super().__init__(
            message,
            hint="Use the ID or a more specific name.",
        )
        self.outcome: Ambiguous = outcome


# --- Backend ----------------------------------------------------------------

class BackendError(AnytypeCliError):
    """Base class for failures reported by the remote API collaborator."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code


class TransportError(BackendError):
    """Raised when the API cannot be reached or returns an unusable reply."""


class AuthError(BackendError):
    """Raised when the API rejects the configured credentials."""


class NotFoundError(BackendError):
    """Raised when the requested entity does not exist."""


class ValidationError(BackendError):
    """Raised when the API (or the CLI) rejects the request parameters."""


# --- Environment / tooling --------------------------------------------------

class EnvironmentError(AnytypeCliError):
    """Raised when a required runtime dependency is not available."""


# --- Programming errors -----------------------------------------------------

class MalformedTableError(ValueError):
    """Raised when a table row does not have exactly one cell per header."""
