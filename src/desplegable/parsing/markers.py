"""Marker scanning shared by the list and disclosure rules.

All helpers read the working offsets of a ParseContext and never mutate it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from desplegable.context import is_space

if TYPE_CHECKING:
    from desplegable.context import ParseContext

BULLET_CHARS = frozenset("*-+")
ORDERED_DELIMITERS = frozenset(".)")
MAX_ORDERED_DIGITS = 9

EXPANDED_GLYPH = "+"
COLLAPSED_GLYPH = ">"
DISCLOSURE_GLYPHS = frozenset((EXPANDED_GLYPH, COLLAPSED_GLYPH))
MIN_RUN = 3

# A list item whose first line opens a disclosure block: "- +++ Title"
EXPANDABLE_ITEM = re.compile(r"(?:[-*+]|\d{1,9}[.)]) (?:\+{3}|>{3})")


@dataclass(frozen=True, slots=True)
class MarkerRun:
    """A maximal run of one disclosure glyph at the start of a line.

    Attributes:
        glyph: ``+`` or ``>``
        length: Number of repeated glyphs
        end: Offset just past the run

    """

    glyph: str
    length: int
    end: int

    @property
    def markup(self) -> str:
        return self.glyph * self.length

    @property
    def expanded(self) -> bool:
        """``+`` blocks start expanded, ``>`` blocks collapsed."""
        return self.glyph == EXPANDED_GLYPH

    def closes(self, other: MarkerRun) -> bool:
        """Can this run close a block opened by ``other``?"""
        return self.glyph == other.glyph and self.length >= other.length


def marker_run(ctx: ParseContext, pos: int, glyph: str | None = None) -> MarkerRun | None:
    """Scan the disclosure marker run starting at ``pos``.

    Args:
        ctx: Parse context
        pos: Offset to scan from (normally a line's content start)
        glyph: Required glyph, or None to accept either

    Returns:
        The run, or None if ``pos`` holds no disclosure glyph
    """
    ch = ctx.char_at(pos)
    if ch not in DISCLOSURE_GLYPHS or (glyph is not None and ch != glyph):
        return None
    end = ctx.skip_chars(pos, ch)
    return MarkerRun(glyph=ch, length=end - pos, end=end)


def is_blank_range(ctx: ParseContext, start: int, end: int) -> bool:
    """True if ``src[start:end]`` holds only whitespace."""
    return not ctx.src[start:end].strip()


def skip_bullet_marker(ctx: ParseContext, line: int) -> int:
    """Match ``[-+*]`` followed by whitespace or end of line.

    Returns:
        Offset just past the marker, or -1
    """
    pos = ctx.content_start(line)
    max_ = ctx.end[line]

    if ctx.char_at(pos) not in BULLET_CHARS:
        return -1
    pos += 1

    # " -test " is not a list item
    if pos < max_ and not is_space(ctx.src[pos]):
        return -1

    return pos


def skip_ordered_marker(ctx: ParseContext, line: int) -> int:
    """Match 1-9 digits, ``.`` or ``)``, then whitespace or end of line.

    Returns:
        Offset just past the marker, or -1
    """
    start = pos = ctx.content_start(line)
    max_ = ctx.end[line]

    # Needs at least a digit and a delimiter
    if pos + 1 >= max_:
        return -1

    if not "0" <= ctx.src[pos] <= "9":
        return -1
    pos += 1

    while True:
        if pos >= max_:
            return -1
        ch = ctx.src[pos]
        pos += 1
        if "0" <= ch <= "9":
            if pos - start > MAX_ORDERED_DIGITS:
                return -1
            continue
        if ch in ORDERED_DELIMITERS:
            break
        return -1

    # " 1.test " is not a list item
    if pos < max_ and not is_space(ctx.src[pos]):
        return -1

    return pos
