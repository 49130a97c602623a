"""Tests for the line table."""

import pytest

from desplegable.lines import Line, LineTable, normalize_source


class TestNormalizeSource:
    """Line endings and NUL handling."""

    def test_crlf_and_cr(self) -> None:
        assert normalize_source("a\r\nb\rc") == "a\nb\nc"

    def test_nul_replaced(self) -> None:
        assert normalize_source("a\0b") == "a�b"


class TestLineTable:
    """Offsets, indentation and the sentinel line."""

    def test_line_count(self) -> None:
        assert LineTable.from_source("a\nb\nc").line_count == 3
        assert len(LineTable.from_source("a\nb\nc")) == 3

    def test_trailing_newline_adds_no_line(self) -> None:
        assert LineTable.from_source("a\n").line_count == 1

    def test_empty_source(self) -> None:
        table = LineTable.from_source("")
        assert table.line_count == 0
        assert table.begin == (0,)

    def test_sentinel(self) -> None:
        table = LineTable.from_source("ab\ncd")
        assert table.begin[2] == 5
        assert table.end[2] == 5
        assert table.is_blank(2)

    def test_offsets(self) -> None:
        table = LineTable.from_source("ab\n  cd")
        assert table.begin == (0, 3, 7)
        assert table.end == (2, 7, 7)
        assert table.shift[1] == 2
        assert table.indent[1] == 2

    def test_tabs_expand_to_four_columns(self) -> None:
        table = LineTable.from_source("a\n\tb\n  \tc")
        assert table.indent[1] == 4
        assert table.shift[1] == 1
        assert table.indent[2] == 4
        assert table.shift[2] == 3

    def test_normalizes_source(self) -> None:
        table = LineTable.from_source("a\r\nb")
        assert table.source == "a\nb"
        assert table.line_count == 2

    def test_blank_lines(self) -> None:
        table = LineTable.from_source("a\n   \nb")
        assert not table.is_blank(0)
        assert table.is_blank(1)

    def test_text(self) -> None:
        table = LineTable.from_source("first\n  second")
        assert table.text(0) == "first"
        assert table.text(1) == "  second"

    def test_getitem(self) -> None:
        table = LineTable.from_source("a\n  b")
        line = table[1]
        assert isinstance(line, Line)
        assert line.content_start == 4
        assert not line.is_blank

    def test_getitem_out_of_range(self) -> None:
        table = LineTable.from_source("a")
        with pytest.raises(IndexError):
            table[2]

    def test_immutable(self) -> None:
        table = LineTable.from_source("a")
        with pytest.raises(AttributeError):
            table.source = "b"  # type: ignore[misc]
