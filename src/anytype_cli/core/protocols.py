"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from anytype_cli.core.models import NamedEntity


class Backend(Protocol):
    """Contract for the remote object-graph API.

    Any object that implements both methods with the correct signatures
    satisfies this protocol structurally (no explicit inheritance
    required).  Retry and backoff, if any, belong to the implementation.
    """

    def list_named_entities(
        self,
        scope: str,
        *parents: str,
        timeout: float | None = None,
    ) -> list[NamedEntity]:
        """Return a fresh snapshot of the entities in *scope*.

        Parameters
        ----------
        scope:
            Entity family to list, e.g. ``"spaces"`` or ``"types"``.
        parents:
            Canonical IDs of the enclosing entities (e.g. the space ID
            when listing types).

        Raises
        ------
        TransportError
            When the API cannot be reached.
        AuthError
            When the API rejects the credentials.
        """
        ...  # pragma: no cover

    def invoke(
        self,
        operation: str,
        *identifiers: str,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Perform *operation* on the entities named by *identifiers*.

        Parameters
        ----------
        operation:
            Operation name, e.g. ``"objects.get"``.
        identifiers:
            Canonical IDs, outermost first (space, then object, ...).
        params:
            Operation-specific query or body parameters.
        timeout:
            Upper bound in seconds for the single remote call.

        Returns
        -------
        Any
            The decoded API response.

        Raises
        ------
        TransportError, AuthError, NotFoundError, ValidationError
            Mapped from the remote failure.
        """
        ...  # pragma: no cover
