"""Adaptive plain-text table rendering.

Column widths are computed from the data under global and per-column
constraints, then every line is left-justified into those widths.

Width pipeline (enforced by :func:`column_widths`):

1. **Header** — start from the header's display length.
2. **Widen** — grow to the longest cell in the column.
3. **Floor** — raise to ``min_width``.
4. **Cap** — clamp to the column's own maximum when set, otherwise to
   ``max_width``.  The per-column cap always takes precedence.

Headers are never truncated.  A data cell longer than its column is
shortened with ``"..."`` only when the column (or the whole table) is
marked truncatable; otherwise it is printed in full and the column is
left ragged.

"Display length" is ``len()`` of the string, i.e. code points.  Wide
glyphs (CJK, emoji) are counted as one column each and will misalign.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from anytype_cli.exceptions import MalformedTableError

ELLIPSIS: str = "..."

DEFAULT_MIN_WIDTH: int = 5
DEFAULT_MAX_WIDTH: int = 80
DEFAULT_PADDING: int = 2


# ---------------------------------------------------------------------------
# Immutable table description
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TableSpec:
    """Everything needed to render one table.

    Every row must have exactly ``len(headers)`` cells; :class:`Table`
    enforces this while rows are added.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()
    column_max_widths: Mapping[int, int | None] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    column_truncate: Mapping[int, bool] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    min_width: int = DEFAULT_MIN_WIDTH
    max_width: int = DEFAULT_MAX_WIDTH
    padding: int = DEFAULT_PADDING
    truncate_long: bool = False

    def truncates(self, column: int) -> bool:
        """Return whether data cells in *column* may be shortened."""
        return self.truncate_long or bool(self.column_truncate.get(column, False))


# ---------------------------------------------------------------------------
# Pure rendering
# ---------------------------------------------------------------------------

def truncate(text: str, width: int) -> str:
    """Shorten *text* to *width* characters, ending in ``"..."``.

    When *width* leaves no room for the ellipsis (``width <= 3``) only the
    first *width* characters are kept.
    """
    if len(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return text[:max(width, 0)]
    return text[:width - len(ELLIPSIS)] + ELLIPSIS


def column_widths(spec: TableSpec) -> list[int]:
    """Compute the final width of every column of *spec*."""
    widths = [len(header) for header in spec.headers]

    for row in spec.rows:
        for index, cell in enumerate(row[:len(widths)]):
            widths[index] = max(widths[index], len(cell))

    for index, width in enumerate(widths):
        width = max(width, spec.min_width)
        column_cap = spec.column_max_widths.get(index)
        if column_cap:
            width = min(width, column_cap)
        elif spec.max_width > 0:
            width = min(width, spec.max_width)
        widths[index] = width

    return widths


def _join(fields: Sequence[str], widths: Sequence[int], padding: int) -> str:
    gap = " " * padding
    return gap.join(text.ljust(width) for text, width in zip(fields, widths))


def render(spec: TableSpec) -> str:
    """Render *spec* as header, dash separator, then one line per row.

    Pure and deterministic: the same spec always yields the same text.
    A table without headers renders as the empty string.
    """
    if not spec.headers:
        return ""

    widths = column_widths(spec)
    lines = [
        _join(spec.headers, widths, spec.padding),
        _join(["-" * width for width in widths], widths, spec.padding),
    ]
    for row in spec.rows:
        cells = [
            truncate(cell, widths[index])
            if spec.truncates(index) and len(cell) > widths[index]
            else cell
            for index, cell in enumerate(row[:len(widths)])
        ]
        lines.append(_join(cells, widths, spec.padding))

    return "".join(line + "\n" for line in lines)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class Table:
    """Mutable builder for a :class:`TableSpec`.

    Usage::

        table = Table(["OBJECT ID", "NAME"])
        table.set_column_width(1, 30).set_column_truncate(1, True)
        for obj in objects:
            table.add_row([obj["id"], obj["name"]])
        text = table.render()

    Setters return ``self`` so they can be chained.  Column indexes
    outside the header range are ignored.
    """

    def __init__(self, headers: Sequence[str]) -> None:
        self._headers: tuple[str, ...] = tuple(headers)
        self._rows: list[tuple[str, ...]] = []
        self._column_max_widths: dict[int, int | None] = {}
        self._column_truncate: dict[int, bool] = {}
        self._min_width: int = DEFAULT_MIN_WIDTH
        self._max_width: int = DEFAULT_MAX_WIDTH
        self._padding: int = DEFAULT_PADDING
        self._truncate_long: bool = False

    def __len__(self) -> int:
        return len(self._rows)

    def __str__(self) -> str:
        return self.render()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_row(self, cells: Sequence[str]) -> Table:
        """Append one row.

        Raises
        ------
        MalformedTableError
            If *cells* does not hold exactly one value per header.
        """
        if len(cells) != len(self._headers):
            raise MalformedTableError(
                f"row has {len(cells)} cells, table has {len(self._headers)} columns",
            )
        self._rows.append(tuple(cells))
        return self

    def set_min_width(self, width: int) -> Table:
        self._min_width = width
        return self

    def set_max_width(self, width: int) -> Table:
        self._max_width = width
        return self

    def set_padding(self, padding: int) -> Table:
        self._padding = padding
        return self

    def set_truncate(self, truncate_long: bool) -> Table:
        """Allow truncation of long cells in every column."""
        self._truncate_long = truncate_long
        return self

    def set_column_width(self, column: int, width: int | None) -> Table:
        """Cap *column* at *width*; ``None`` or ``0`` removes the cap."""
        if 0 <= column < len(self._headers):
            self._column_max_widths[column] = width
        return self

    def set_column_truncate(self, column: int, truncate_long: bool) -> Table:
        if 0 <= column < len(self._headers):
            self._column_truncate[column] = truncate_long
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def spec(self) -> TableSpec:
        """Freeze the current state into an immutable :class:`TableSpec`."""
        return TableSpec(
            headers=self._headers,
            rows=tuple(self._rows),
            column_max_widths=MappingProxyType(dict(self._column_max_widths)),
            column_truncate=MappingProxyType(dict(self._column_truncate)),
            min_width=self._min_width,
            max_width=self._max_width,
            padding=self._padding,
            truncate_long=self._truncate_long,
        )

    def render(self) -> str:
        return render(self.spec())
