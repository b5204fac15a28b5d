"""Tests for the adaptive table renderer (core/table.py).

Coverage:
* Width pipeline: header → widen → floor → cap.
* Per-column cap beats the global cap.
* Truncation only where allowed, never in the header row.
* Empty tables, idempotence, padding and field counts.
* Builder validation.
"""

from __future__ import annotations

from types import MappingProxyType

import pytest

from anytype_cli.core.table import Table, TableSpec, column_widths, render, truncate
from anytype_cli.exceptions import MalformedTableError


def _spec(**overrides: object) -> TableSpec:
    """Factory with sensible defaults for concise tests."""
    defaults: dict[str, object] = {
        "headers": ("ID", "NAME"),
        "rows": (("123", "A very long name exceeding width"),),
        "column_max_widths": MappingProxyType({1: 10}),
        "column_truncate": MappingProxyType({1: True}),
        "min_width": 5,
    }
    defaults.update(overrides)
    return TableSpec(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# truncate
# ---------------------------------------------------------------------------

class TestTruncate:
    def test_short_text_unchanged(self) -> None:
        assert truncate("abc", 10) == "abc"

    def test_adds_ellipsis(self) -> None:
        assert truncate("abcdefghijkl", 8) == "abcde..."

    @pytest.mark.parametrize(("width", "expected"), [(3, "abc"), (2, "ab"), (0, "")])
    def test_no_room_for_ellipsis(self, width: int, expected: str) -> None:
        assert truncate("abcdef", width) == expected


# ---------------------------------------------------------------------------
# Column widths
# ---------------------------------------------------------------------------

class TestColumnWidths:
    def test_header_sets_initial_width(self) -> None:
        spec = TableSpec(headers=("DESCRIPTION",), rows=(("x",),))
        assert column_widths(spec) == [11]

    def test_widens_to_longest_cell(self) -> None:
        spec = TableSpec(headers=("ID",), rows=(("abcdefgh",), ("ab",)))
        assert column_widths(spec) == [8]

    def test_floor_at_min_width(self) -> None:
        spec = TableSpec(headers=("ID",), rows=(("1",),), min_width=5)
        assert column_widths(spec) == [5]

    def test_global_cap(self) -> None:
        spec = TableSpec(headers=("N",), rows=(("x" * 50,),), max_width=20)
        assert column_widths(spec) == [20]

    def test_column_cap_beats_global_cap(self) -> None:
        spec = TableSpec(
            headers=("N",),
            rows=(("x" * 50,),),
            max_width=20,
            column_max_widths=MappingProxyType({0: 30}),
        )
        assert column_widths(spec) == [30]

    def test_zero_global_cap_means_unbounded(self) -> None:
        spec = TableSpec(headers=("N",), rows=(("x" * 120,),), max_width=0)
        assert column_widths(spec) == [120]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRender:
    def test_truncated_column_is_exactly_capped(self) -> None:
        lines = render(_spec()).splitlines()
        header, separator, row = lines
        # ID column: max(2, 3) floored to 5; NAME capped at 10.
        assert separator == "-----  ----------"
        assert row[:5] == "123  "
        assert row[7:] == "A very ..."
        assert len(row[7:]) == 10
        assert header.startswith("ID     NAME")

    def test_id_column_is_never_truncated(self) -> None:
        spec = _spec(rows=(("an-id-longer-than-ten-chars", "short"),))
        row = render(spec).splitlines()[2]
        assert row.startswith("an-id-longer-than-ten-chars")

    def test_header_never_truncated(self) -> None:
        spec = TableSpec(
            headers=("A VERY LONG HEADER",),
            rows=(("x" * 40,),),
            column_max_widths=MappingProxyType({0: 6}),
            truncate_long=True,
        )
        header, separator, row = render(spec).splitlines()
        assert header == "A VERY LONG HEADER"
        assert separator == "------"
        assert row == "xxx..."

    def test_untruncatable_column_is_ragged(self) -> None:
        spec = _spec(column_truncate=MappingProxyType({}))
        row = render(spec).splitlines()[2]
        assert row.endswith("A very long name exceeding width")

    def test_table_wide_truncate_flag(self) -> None:
        spec = _spec(column_truncate=MappingProxyType({}), truncate_long=True)
        assert render(spec).splitlines()[2].endswith("A very ...")

    def test_zero_rows_emits_header_and_separator(self) -> None:
        text = render(TableSpec(headers=("ID", "NAME")))
        assert text == "ID     NAME \n-----  -----\n"

    def test_zero_headers_is_empty(self) -> None:
        assert render(TableSpec(headers=())) == ""

    def test_idempotent(self) -> None:
        spec = _spec()
        assert render(spec) == render(spec)

    @pytest.mark.parametrize("padding", [1, 2, 4])
    def test_every_line_has_n_fields(self, padding: int) -> None:
        spec = TableSpec(
            headers=("KEY", "NAME", "FORMAT"),
            rows=(("k1", "Name one", "text"), ("k2", "Two", "number")),
            padding=padding,
        )
        widths = column_widths(spec)
        for line in render(spec).splitlines():
            offset = 0
            for index, width in enumerate(widths):
                field_text = line[offset:offset + width]
                assert len(field_text) == width
                offset += width
                if index < len(widths) - 1:
                    assert line[offset:offset + padding] == " " * padding
                    offset += padding
            assert offset == len(line)

    def test_every_line_ends_with_newline(self) -> None:
        text = render(_spec())
        assert text.endswith("\n")
        assert text.count("\n") == 3


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class TestTableBuilder:
    def test_matches_spec_rendering(self) -> None:
        table = Table(["ID", "NAME"]).set_column_width(1, 10).set_column_truncate(1, True)
        table.add_row(["123", "A very long name exceeding width"])
        assert table.render() == render(_spec())
        assert str(table) == table.render()

    def test_len_counts_rows(self) -> None:
        table = Table(["A"]).add_row(["1"]).add_row(["2"])
        assert len(table) == 2

    def test_row_count_mismatch_raises(self) -> None:
        table = Table(["A", "B"])
        with pytest.raises(MalformedTableError, match="1 cells"):
            table.add_row(["only one"])

    def test_out_of_range_columns_are_ignored(self) -> None:
        spec = Table(["A"]).set_column_width(5, 3).set_column_truncate(-1, True).spec()
        assert dict(spec.column_max_widths) == {}
        assert dict(spec.column_truncate) == {}

    def test_spec_is_a_snapshot(self) -> None:
        table = Table(["A"])
        spec = table.spec()
        table.add_row(["x"])
        assert spec.rows == ()

    def test_setters(self) -> None:
        spec = (
            Table(["A"])
            .set_min_width(1)
            .set_max_width(40)
            .set_padding(3)
            .set_truncate(True)
            .spec()
        )
        assert (spec.min_width, spec.max_width, spec.padding, spec.truncate_long) == (1, 40, 3, True)
