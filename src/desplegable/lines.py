"""Line table: raw text split into indexed lines.

Each line records where it starts and ends in the normalized source and how
far its first non-whitespace character is indented, both as a character
count and as a tab-expanded column (tabs stop every 4 columns).

Thread Safety:
LineTable is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

TAB_WIDTH = 4


def normalize_source(source: str) -> str:
    """Normalize line endings and replace NUL characters."""
    return source.replace("\r\n", "\n").replace("\r", "\n").replace("\0", "�")


@dataclass(frozen=True, slots=True)
class Line:
    """A single line of the table.

    Attributes:
        begin: Offset of the first character
        end: Offset of the terminating newline (or end of text)
        shift: Leading space/tab characters (not tab-expanded)
        indent: Leading indent column (tab-expanded)
        tab_base: Column base that tab expansion is relative to

    """

    begin: int
    end: int
    shift: int
    indent: int
    tab_base: int = 0

    @property
    def content_start(self) -> int:
        """Offset of the first non-whitespace character."""
        return self.begin + self.shift

    @property
    def is_blank(self) -> bool:
        return self.begin + self.shift >= self.end


@dataclass(frozen=True, slots=True)
class LineTable:
    """Immutable table of line offsets for one source text.

    A sentinel entry at ``len(source)`` follows the last real line, so
    ``begin[line_count]`` is always a valid lookup.

    Example:
        >>> table = LineTable.from_source("a\\n\\tb")
        >>> table.line_count
        2
        >>> table.indent[1]
        4

    """

    source: str
    begin: tuple[int, ...]
    end: tuple[int, ...]
    shift: tuple[int, ...]
    indent: tuple[int, ...]
    tab_base: tuple[int, ...]

    @classmethod
    def from_source(cls, source: str) -> LineTable:
        """Split (normalized) source into a line table."""
        src = normalize_source(source)
        begin: list[int] = []
        end: list[int] = []
        shift: list[int] = []
        indent: list[int] = []

        start = 0
        length = len(src)
        while start < length:
            newline = src.find("\n", start)
            stop = length if newline < 0 else newline

            pos = start
            column = 0
            while pos < stop and src[pos] in " \t":
                if src[pos] == "\t":
                    column += TAB_WIDTH - column % TAB_WIDTH
                else:
                    column += 1
                pos += 1

            begin.append(start)
            end.append(stop)
            shift.append(pos - start)
            indent.append(column)
            start = stop + 1

        # Sentinel
        begin.append(length)
        end.append(length)
        shift.append(0)
        indent.append(0)

        return cls(
            source=src,
            begin=tuple(begin),
            end=tuple(end),
            shift=tuple(shift),
            indent=tuple(indent),
            tab_base=(0,) * len(begin),
        )

    @property
    def line_count(self) -> int:
        """Number of real lines (the sentinel excluded)."""
        return len(self.begin) - 1

    def __len__(self) -> int:
        return self.line_count

    def __getitem__(self, index: int) -> Line:
        if not 0 <= index <= self.line_count:
            raise IndexError(f"line {index} out of range")
        return Line(
            begin=self.begin[index],
            end=self.end[index],
            shift=self.shift[index],
            indent=self.indent[index],
            tab_base=self.tab_base[index],
        )

    def is_blank(self, index: int) -> bool:
        return self.begin[index] + self.shift[index] >= self.end[index]

    def text(self, index: int) -> str:
        """Raw text of a line, without its newline."""
        return self.source[self.begin[index] : self.end[index]]
