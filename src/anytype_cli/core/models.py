"""Domain models for anytype-cli.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  A :class:`NamedEntity` snapshot is built
fresh for every resolution call and discarded afterwards; names are
mutable on the server, so nothing here is cached across invocations.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union


# ---------------------------------------------------------------------------
# Named entity snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NamedEntity:
    """The minimal shape the identifier resolver needs."""

    id: str
    """Opaque, globally unique, stable identifier."""

    name: str
    """Human-readable name.  Mutable and not unique."""

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any]) -> NamedEntity:
        """Build an entity from one API listing entry.

        A missing or ``None`` name becomes the empty string, which never
        matches a non-empty query.
        """
        name = raw.get("name")
        return cls(id=str(raw["id"]), name=str(name) if name is not None else "")


# ---------------------------------------------------------------------------
# Resolution outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Resolved:
    """The input identified exactly one entity."""

    id: str


@dataclass(frozen=True, slots=True)
class Ambiguous:
    """The input matched several entities; the user must be more specific.

    ``candidates`` holds every match in snapshot order.  The display cap
    is applied only when the message is rendered.
    """

    query: str
    candidates: tuple[NamedEntity, ...]

    @property
    def total(self) -> int:
        return len(self.candidates)


@dataclass(frozen=True, slots=True)
class Unresolved:
    """Nothing matched.  The original input is forwarded as-is."""

    original_input: str


ResolutionOutcome = Union[Resolved, Ambiguous, Unresolved]
