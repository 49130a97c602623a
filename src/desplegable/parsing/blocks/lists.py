"""Host list grammar: ordered and bullet lists.

Each item is parsed by recursing into the shared tokenizer with the block
indent moved to the item's content column. Tight/loose is decided across
items:

- an item is loose if its nested parse saw a blank line between blocks
- the list is loose if any item is loose, or if a blank line separates an
  item from the next one
- a blank line after the final item ends the list and does not count

A tight list keeps its paragraph tokens but marks them hidden, so the
renderer drops the ``<p>`` wrappers without changing the event shape.

Subclasses customise the emitted open tokens via ``open_list`` and
``open_item``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from desplegable.context import ParentType
from desplegable.lines import TAB_WIDTH
from desplegable.parsing.blocks.core import CODE_INDENT, _terminated
from desplegable.parsing.markers import skip_bullet_marker, skip_ordered_marker
from desplegable.parsing.ruler import ProbeMode
from desplegable.tokens import Token, TokenType

if TYPE_CHECKING:
    from desplegable.context import ParseContext

# Content more than this far past the marker is an indented code block
MAX_INDENT_AFTER_MARKER = 4


def mark_tight_paragraphs(ctx: ParseContext, list_index: int) -> None:
    """Hide the paragraph open/close pairs directly inside a tight list's items."""
    level = ctx.level + 2
    tokens = ctx.tokens
    i = list_index + 2
    stop = len(tokens) - 2
    while i < stop:
        if tokens[i].level == level and tokens[i].type is TokenType.PARAGRAPH_OPEN:
            tokens[i].hidden = True
            tokens[i + 2].hidden = True
            i += 2
        i += 1


class ListRule:
    """Ordered (``1.``/``1)``) and bullet (``-``/``*``/``+``) lists."""

    name: ClassVar[str] = "list"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        next_line = start

        if ctx.indent[next_line] - ctx.blk_indent >= CODE_INDENT:
            return False

        # Deeply indented marker under a list item is paragraph continuation:
        #  - item 1
        #   - item 2
        #    - item 3
        #     - item 4
        #      - this one is a paragraph continuation
        if (
            ctx.list_indent is not None
            and ctx.indent[next_line] - ctx.list_indent >= CODE_INDENT
            and ctx.indent[next_line] < ctx.blk_indent
        ):
            return False

        # A list may interrupt a paragraph only under stricter conditions
        # (validate mode only). An outdented marker still ends the item.
        is_terminating_paragraph = (
            mode is ProbeMode.VALIDATE
            and ctx.parent_type is ParentType.PARAGRAPH
            and ctx.indent[next_line] >= ctx.blk_indent
        )

        marker_start = ctx.content_start(next_line)
        marker_value = 1
        pos_after_marker = skip_ordered_marker(ctx, next_line)
        if pos_after_marker >= 0:
            ordered = True
            marker_value = int(ctx.src[marker_start : pos_after_marker - 1])
            # "1984 was a year." must stay a paragraph
            if is_terminating_paragraph and marker_value != 1:
                return False
        else:
            pos_after_marker = skip_bullet_marker(ctx, next_line)
            if pos_after_marker < 0:
                return False
            ordered = False

        # An empty item cannot interrupt a paragraph
        if is_terminating_paragraph and ctx.skip_spaces(pos_after_marker) >= ctx.end[next_line]:
            return False

        if mode is ProbeMode.VALIDATE:
            return True

        marker_char = ctx.src[pos_after_marker - 1]
        list_index = len(ctx.tokens)
        list_token = self.open_list(ctx, ordered, marker_value, marker_char)
        list_token.map = list_span = [next_line, 0]

        tight = True
        prev_empty_end = False

        with ctx.scoped("parent_type"):
            ctx.parent_type = ParentType.LIST

            while next_line < end:
                pos = pos_after_marker
                max_ = ctx.end[next_line]
                initial = offset = (
                    ctx.indent[next_line] + pos_after_marker - ctx.content_start(next_line)
                )

                while pos < max_:
                    ch = ctx.src[pos]
                    if ch == "\t":
                        offset += TAB_WIDTH - (offset + ctx.tab_base[next_line]) % TAB_WIDTH
                    elif ch == " ":
                        offset += 1
                    else:
                        break
                    pos += 1

                content_start = pos
                if content_start >= max_:
                    # "-    \n  3": the marker alone on its line has indent 1
                    indent_after_marker = 1
                else:
                    indent_after_marker = offset - initial
                # More than 4 spaces is an indented code block inside the item
                if indent_after_marker > MAX_INDENT_AFTER_MARKER:
                    indent_after_marker = 1

                item_indent = initial + indent_after_marker

                item_token = self.open_item(ctx, next_line, marker_char)
                item_token.map = item_span = [next_line, 0]
                if ordered:
                    item_token.info = ctx.src[marker_start : pos_after_marker - 1]

                with ctx.scoped("blk_indent", "list_indent", "tight"), ctx.scoped_line(next_line):
                    ctx.list_indent = ctx.blk_indent
                    ctx.blk_indent = item_indent
                    ctx.tight = True
                    ctx.shift[next_line] = content_start - ctx.begin[next_line]
                    ctx.indent[next_line] = offset

                    if content_start >= max_ and ctx.is_empty(next_line + 1):
                        # An item cannot start with two blank lines:
                        #   -
                        #
                        #     foo
                        ctx.line = min(next_line + 2, end)
                    else:
                        ctx.tokenizer.tokenize(ctx, next_line, end)

                    if not ctx.tight or prev_empty_end:
                        tight = False
                    # Blank after this item: loose only if another item follows
                    prev_empty_end = ctx.line - next_line > 1 and ctx.is_empty(ctx.line - 1)

                token = ctx.push(TokenType.LIST_ITEM_CLOSE, "li", -1)
                token.markup = marker_char

                next_line = ctx.line
                item_span[1] = next_line

                if next_line >= end:
                    break

                # Outdented content closes the list
                if ctx.indent[next_line] < ctx.blk_indent:
                    break
                # Indented 4+ is a code block, not a new item
                if ctx.indent[next_line] - ctx.blk_indent >= CODE_INDENT:
                    break
                # A higher-priority construct interrupts the list
                if _terminated(ctx, ParentType.LIST, next_line, end):
                    break

                if ordered:
                    pos_after_marker = skip_ordered_marker(ctx, next_line)
                    if pos_after_marker < 0:
                        break
                    marker_start = ctx.content_start(next_line)
                else:
                    pos_after_marker = skip_bullet_marker(ctx, next_line)
                    if pos_after_marker < 0:
                        break

                # A different marker glyph starts a new list
                if ctx.src[pos_after_marker - 1] != marker_char:
                    break

            token = ctx.push(
                TokenType.ORDERED_LIST_CLOSE if ordered else TokenType.BULLET_LIST_CLOSE,
                "ol" if ordered else "ul",
                -1,
            )
            token.markup = marker_char

            list_span[1] = next_line
            ctx.line = next_line

        if tight:
            mark_tight_paragraphs(ctx, list_index)

        return True

    # =========================================================================
    # Hooks
    # =========================================================================

    def open_list(
        self, ctx: ParseContext, ordered: bool, start_value: int, marker_char: str
    ) -> Token:
        """Emit the list open token."""
        if ordered:
            token = ctx.push(TokenType.ORDERED_LIST_OPEN, "ol", 1)
            if start_value != 1:
                token.attrs["start"] = str(start_value)
        else:
            token = ctx.push(TokenType.BULLET_LIST_OPEN, "ul", 1)
        token.markup = marker_char
        return token

    def open_item(self, ctx: ParseContext, line: int, marker_char: str) -> Token:
        """Emit an item open token. ``line`` is the item's marker line."""
        token = ctx.push(TokenType.LIST_ITEM_OPEN, "li", 1)
        token.markup = marker_char
        return token
