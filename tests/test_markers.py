"""Tests for list and disclosure marker scanning."""

import pytest

from desplegable.parsing.markers import (
    EXPANDABLE_ITEM,
    MarkerRun,
    is_blank_range,
    marker_run,
    skip_bullet_marker,
    skip_ordered_marker,
)


class TestMarkerRun:
    """Disclosure marker runs."""

    def test_scan(self, make_context) -> None:
        run = marker_run(make_context("++++ title"), 0)
        assert run == MarkerRun(glyph="+", length=4, end=4)
        assert run.markup == "++++"
        assert run.expanded

    def test_collapsed(self, make_context) -> None:
        run = marker_run(make_context(">>> t"), 0)
        assert run is not None
        assert not run.expanded

    def test_not_a_glyph(self, make_context) -> None:
        assert marker_run(make_context("- a"), 0) is None

    def test_required_glyph(self, make_context) -> None:
        ctx = make_context(">>>")
        assert marker_run(ctx, 0, "+") is None
        assert marker_run(ctx, 0, ">") is not None

    def test_closes(self) -> None:
        opener = MarkerRun(glyph="+", length=3, end=3)
        assert MarkerRun(glyph="+", length=3, end=0).closes(opener)
        assert MarkerRun(glyph="+", length=5, end=0).closes(opener)
        assert not MarkerRun(glyph="+", length=2, end=0).closes(opener)
        assert not MarkerRun(glyph=">", length=3, end=0).closes(opener)

    def test_is_blank_range(self, make_context) -> None:
        ctx = make_context("+++  \t x")
        assert is_blank_range(ctx, 3, 7)
        assert not is_blank_range(ctx, 3, 8)


class TestListMarkers:
    """Bullet and ordered marker recognition."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [("- a", 1), ("* a", 1), ("+\ta", 1), ("-", 1), ("-a", -1), ("x", -1)],
    )
    def test_bullet(self, make_context, source: str, expected: int) -> None:
        assert skip_bullet_marker(make_context(source), 0) == expected

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("1. a", 2),
            ("12) a", 3),
            ("123456789. a", 10),
            ("1234567890. a", -1),
            ("1.", 2),
            ("1.a", -1),
            ("1", -1),
            ("a.", -1),
            ("1:", -1),
        ],
    )
    def test_ordered(self, make_context, source: str, expected: int) -> None:
        assert skip_ordered_marker(make_context(source), 0) == expected

    def test_uses_working_offsets(self, make_context) -> None:
        ctx = make_context("   - a")
        assert skip_bullet_marker(ctx, 0) == 4


class TestExpandablePattern:
    """First-line pattern that flags an item as expandable."""

    @pytest.mark.parametrize(
        "text", ["- +++ a", "* >>> a", "+ +++", "1. >>> a", "10) ++++ a"]
    )
    def test_matches(self, text: str) -> None:
        assert EXPANDABLE_ITEM.match(text)

    @pytest.mark.parametrize("text", ["- ++ a", "-  +++ a", "a +++", "1234567890. +++"])
    def test_rejects(self, text: str) -> None:
        assert not EXPANDABLE_ITEM.match(text)
