"""Parse context shared by all block rules during one parse.

The context owns the cursor, the indentation baselines and the token
stream. Rules that recurse into the tokenizer change some of these fields
for the duration of the nested call. They do so only through the scope
guards below, which snapshot on entry and restore on every exit path:

    with ctx.scoped("blk_indent", "list_indent", "tight"):
        ctx.list_indent = ctx.blk_indent
        ctx.blk_indent = item_indent
        ctx.tokenizer.tokenize(ctx, line, end)

Line offsets are read from an immutable LineTable. Container rules that need
to re-base a line (a list item's first line starts after its marker) edit
the context's working copies under ``scoped_line``.

Thread Safety:
One ParseContext per parse call. Never share an instance across threads or
across documents.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any

from desplegable.lines import TAB_WIDTH, LineTable
from desplegable.tokens import Token, TokenType

if TYPE_CHECKING:
    from desplegable.parsing.inline import InlineParser
    from desplegable.parsing.tokenizer import BlockTokenizer


class ParentType(Enum):
    """The block that encloses the rule currently being probed."""

    ROOT = "root"
    PARAGRAPH = "paragraph"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    REFERENCE = "reference"


SCALAR_FIELDS = (
    "line",
    "line_max",
    "blk_indent",
    "list_indent",
    "tight",
    "parent_type",
    "level",
)


def is_space(ch: str) -> bool:
    """Space or tab (the only whitespace that counts toward indentation)."""
    return ch == " " or ch == "\t"


class ParseContext:
    """Mutable, stack-disciplined state for one parse.

    Attributes:
        src: Normalized source text
        table: The immutable line table
        begin, end, shift, indent, tab_base: Working per-line offsets
        line: Cursor (next line to tokenize)
        line_max: Upper bound for lazy paragraph continuation
        blk_indent: Indent column that content must reach to stay in the block
        list_indent: Indent of the enclosing list marker, None outside lists
        tight: Cleared by the tokenizer when blank lines separate blocks
        parent_type: The enclosing block type
        level: Token nesting level
        tokens: The event stream
        env: Free-form per-document environment
        source_file: Source path for error messages

    """

    __slots__ = (
        "src",
        "table",
        "tokenizer",
        "inline",
        "env",
        "source_file",
        "begin",
        "end",
        "shift",
        "indent",
        "tab_base",
        "line",
        "line_max",
        "blk_indent",
        "list_indent",
        "tight",
        "parent_type",
        "level",
        "tokens",
    )

    def __init__(
        self,
        table: LineTable,
        tokenizer: BlockTokenizer,
        inline: InlineParser,
        env: dict[str, Any] | None = None,
        source_file: str | None = None,
    ) -> None:
        self.src = table.source
        self.table = table
        self.tokenizer = tokenizer
        self.inline = inline
        self.env: dict[str, Any] = env if env is not None else {}
        self.source_file = source_file

        self.begin = list(table.begin)
        self.end = list(table.end)
        self.shift = list(table.shift)
        self.indent = list(table.indent)
        self.tab_base = list(table.tab_base)

        self.line = 0
        self.line_max = table.line_count
        self.blk_indent = 0
        self.list_indent: int | None = None
        self.tight = False
        self.parent_type = ParentType.ROOT
        self.level = 0
        self.tokens: list[Token] = []

    # =========================================================================
    # Scope guards
    # =========================================================================

    @contextmanager
    def scoped(self, *fields: str) -> Iterator[ParseContext]:
        """Snapshot ``fields`` and restore them when the block exits."""
        saved = [(name, getattr(self, name)) for name in fields]
        try:
            yield self
        finally:
            for name, value in saved:
                setattr(self, name, value)

    @contextmanager
    def scoped_line(self, line: int) -> Iterator[ParseContext]:
        """Snapshot the working offsets of one line and restore them on exit."""
        saved = (self.begin[line], self.shift[line], self.indent[line], self.tab_base[line])
        try:
            yield self
        finally:
            self.begin[line], self.shift[line], self.indent[line], self.tab_base[line] = saved

    def snapshot(self) -> tuple[Any, ...]:
        """All scalar fields, for invariant checks."""
        return tuple(getattr(self, name) for name in SCALAR_FIELDS)

    # =========================================================================
    # Token stream
    # =========================================================================

    def push(self, type_: TokenType, tag: str, nesting: int) -> Token:
        """Append a block token at the current level and maintain ``level``."""
        if nesting < 0:
            self.level -= 1
        token = Token(type=type_, tag=tag, nesting=nesting, level=self.level, block=True)
        if nesting > 0:
            self.level += 1
        self.tokens.append(token)
        return token

    # =========================================================================
    # Scanning helpers
    # =========================================================================

    def char_at(self, pos: int) -> str:
        """Character at ``pos``, or an empty string past the end."""
        return self.src[pos] if 0 <= pos < len(self.src) else ""

    def content_start(self, line: int) -> int:
        return self.begin[line] + self.shift[line]

    def is_empty(self, line: int) -> bool:
        return self.begin[line] + self.shift[line] >= self.end[line]

    def skip_empty_lines(self, line: int) -> int:
        while line < self.line_max and self.is_empty(line):
            line += 1
        return line

    def skip_spaces(self, pos: int) -> int:
        while pos < len(self.src) and is_space(self.src[pos]):
            pos += 1
        return pos

    def skip_spaces_back(self, pos: int, minimum: int) -> int:
        while pos > minimum:
            if not is_space(self.src[pos - 1]):
                return pos
            pos -= 1
        return pos

    def skip_chars(self, pos: int, ch: str) -> int:
        while pos < len(self.src) and self.src[pos] == ch:
            pos += 1
        return pos

    def skip_chars_back(self, pos: int, ch: str, minimum: int) -> int:
        while pos > minimum:
            if self.src[pos - 1] != ch:
                return pos
            pos -= 1
        return pos

    def get_lines(self, begin: int, end: int, indent: int, keep_last_lf: bool) -> str:
        """Join lines ``[begin, end)`` with up to ``indent`` columns stripped.

        Tabs that straddle the strip boundary are expanded to spaces.
        """
        if begin >= end:
            return ""

        parts: list[str] = []
        for line in range(begin, end):
            line_indent = 0
            line_start = first = self.begin[line]
            last = self.end[line] + 1 if line + 1 < end or keep_last_lf else self.end[line]
            # The final line of the source has no newline to keep
            last = min(last, len(self.src))

            while first < last and line_indent < indent:
                ch = self.src[first]
                if is_space(ch):
                    if ch == "\t":
                        line_indent += TAB_WIDTH - (line_indent + self.tab_base[line]) % TAB_WIDTH
                    else:
                        line_indent += 1
                elif first - line_start < self.shift[line]:
                    # Virtual spacing left behind by a blockquote marker
                    line_indent += 1
                else:
                    break
                first += 1

            text = self.src[first:last]
            if line_indent > indent:
                text = " " * (line_indent - indent) + text
            parts.append(text)

        return "".join(parts)
