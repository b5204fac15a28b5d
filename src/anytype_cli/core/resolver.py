"""Pure identifier resolution.

Turns a user-supplied string — an exact ID, an exact name, or a
fragment of a name — into a single canonical identifier.

Priority order (first success wins):

1. **Exact ID** — byte-exact, case-sensitive.  Beats any name match.
2. **Exact name** — case-insensitive.  Two or more such matches are
   reported as :class:`Ambiguous` rather than picked by listing order.
3. **Partial name** — case-insensitive substring.  One match resolves;
   several are :class:`Ambiguous`.
4. **Fallback** — :class:`Unresolved`; the caller forwards the raw input.

No I/O and no global state: the snapshot is supplied by the caller.
"""

from __future__ import annotations

from collections.abc import Sequence

from anytype_cli.core.models import (
    Ambiguous,
    NamedEntity,
    ResolutionOutcome,
    Resolved,
    Unresolved,
)

DISAMBIGUATION_CAP: int = 5
"""Maximum number of ambiguous candidates listed to the user."""


def _fold(text: str) -> str:
    return text.casefold()


def resolve(candidates: Sequence[NamedEntity], value: str) -> ResolutionOutcome:
    """Resolve *value* against a snapshot of *candidates*.

    Never raises for malformed input; an empty *value* matches nothing
    and falls through to :class:`Unresolved`.
    """
    if not value:
        return Unresolved(value)

    for entity in candidates:
        if entity.id == value:
            return Resolved(entity.id)

    folded = _fold(value)

    exact = [entity for entity in candidates if _fold(entity.name) == folded]
    if len(exact) == 1:
        return Resolved(exact[0].id)
    if exact:
        return Ambiguous(query=value, candidates=tuple(exact))

    partial = [entity for entity in candidates if folded in _fold(entity.name)]
    if len(partial) == 1:
        return Resolved(partial[0].id)
    if partial:
        return Ambiguous(query=value, candidates=tuple(partial))

    return Unresolved(value)


def describe_ambiguity(
    outcome: Ambiguous,
    noun: str = "space",
    *,
    cap: int = DISAMBIGUATION_CAP,
) -> str:
    """Build the multi-line disambiguation message for *outcome*.

    Example::

        multiple spaces matched 'Project':
          - 'Project Alpha' (ID: a1)
          - 'Project Beta' (ID: a2)
    """
    lines = [f"multiple {noun}s matched '{outcome.query}':"]
    lines.extend(
        f"  - '{entity.name}' (ID: {entity.id})"
        for entity in outcome.candidates[:cap]
    )
    omitted = outcome.total - cap
    if omitted > 0:
        lines.append(f"  ... and {omitted} more")
    return "\n".join(lines)
