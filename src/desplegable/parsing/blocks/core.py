"""Core host block rules: code, fences, quotes, breaks, headings, paragraphs.

Each rule is a stateless class implementing the BlockRule protocol. None of
them raise on malformed input: a rule that does not apply returns False.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import TYPE_CHECKING, ClassVar

from desplegable.context import ParentType, is_space
from desplegable.lines import TAB_WIDTH
from desplegable.parsing.ruler import ProbeMode
from desplegable.tokens import TokenType

if TYPE_CHECKING:
    from desplegable.context import ParseContext

CODE_INDENT = 4
MAX_HEADING_LEVEL = 6


def _terminated(ctx: ParseContext, parent: ParentType, line: int, end: int) -> bool:
    """Does any rule allowed to interrupt ``parent`` match at ``line``?"""
    return any(
        rule.probe(ctx, line, end, ProbeMode.VALIDATE)
        for rule in ctx.tokenizer.chain.terminators(parent)
    )


class CodeRule:
    """Indented code block (4+ columns past the block indent)."""

    name: ClassVar[str] = "code"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        if ctx.indent[start] - ctx.blk_indent < CODE_INDENT:
            return False
        # Never an interrupter, so validate mode is never asked
        if mode is ProbeMode.VALIDATE:
            return True

        next_line = last = start + 1
        while next_line < end:
            if ctx.is_empty(next_line):
                next_line += 1
                continue
            if ctx.indent[next_line] - ctx.blk_indent >= CODE_INDENT:
                next_line += 1
                last = next_line
                continue
            break

        ctx.line = last
        token = ctx.push(TokenType.CODE_BLOCK, "code", 0)
        token.content = ctx.get_lines(start, last, CODE_INDENT + ctx.blk_indent, False) + "\n"
        token.map = [start, ctx.line]
        return True


class FenceRule:
    """Fenced code block delimited by ``` or ~~~."""

    name: ClassVar[str] = "fence"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        pos = ctx.content_start(start)
        max_ = ctx.end[start]

        if ctx.indent[start] - ctx.blk_indent >= CODE_INDENT:
            return False
        if pos + 3 > max_:
            return False

        marker = ctx.src[pos]
        if marker != "~" and marker != "`":
            return False

        mem = pos
        pos = ctx.skip_chars(pos, marker)
        length = pos - mem
        if length < 3:
            return False

        markup = ctx.src[mem:pos]
        params = ctx.src[pos:max_]
        if marker == "`" and "`" in params:
            return False

        if mode is ProbeMode.VALIDATE:
            return True

        next_line = start
        have_end_marker = False
        while True:
            next_line += 1
            # Unclosed fence runs to the end of the scope
            if next_line >= end:
                break

            pos = mem = ctx.content_start(next_line)
            max_ = ctx.end[next_line]

            # A non-empty line with negative indent closes the enclosing list item
            if pos < max_ and ctx.indent[next_line] < ctx.blk_indent:
                break
            if ctx.char_at(pos) != marker:
                continue
            if ctx.indent[next_line] - ctx.blk_indent >= CODE_INDENT:
                continue
            pos = ctx.skip_chars(pos, marker)
            if pos - mem < length:
                continue
            pos = ctx.skip_spaces(pos)
            if pos < max_:
                continue

            have_end_marker = True
            break

        ctx.line = next_line + (1 if have_end_marker else 0)
        token = ctx.push(TokenType.FENCE, "code", 0)
        token.info = params.strip()
        token.content = ctx.get_lines(start + 1, next_line, ctx.indent[start], True)
        token.markup = markup
        token.map = [start, ctx.line]
        return True


class BlockquoteRule:
    """Block quote: lines prefixed with ``>``, with lazy continuation.

    Each quoted line is re-based past its ``>`` marker under a scope guard
    so the nested tokenizer sees plain content.
    """

    name: ClassVar[str] = "blockquote"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        pos = ctx.content_start(start)

        if ctx.indent[start] - ctx.blk_indent >= CODE_INDENT:
            return False
        if ctx.char_at(pos) != ">":
            return False
        if mode is ProbeMode.VALIDATE:
            return True

        with ExitStack() as lines, ctx.scoped("line_max", "parent_type", "blk_indent"):
            ctx.parent_type = ParentType.BLOCKQUOTE
            last_line_empty = False
            next_line = start

            while next_line < end:
                is_outdented = ctx.indent[next_line] < ctx.blk_indent
                pos = ctx.content_start(next_line)
                max_ = ctx.end[next_line]

                # An empty line ends the quote
                if pos >= max_:
                    break

                if ctx.src[pos] == ">" and not is_outdented:
                    lines.enter_context(ctx.scoped_line(next_line))
                    last_line_empty = self._strip_marker(ctx, next_line, pos + 1, max_)
                    next_line += 1
                    continue

                # Lazy continuation only follows a non-empty quoted line
                if last_line_empty:
                    break

                if _terminated(ctx, ParentType.BLOCKQUOTE, next_line, end):
                    ctx.line_max = next_line
                    if ctx.blk_indent != 0:
                        lines.enter_context(ctx.scoped_line(next_line))
                        ctx.indent[next_line] -= ctx.blk_indent
                    break

                # Lazy line: the paragraph rule treats negative indent as continuation
                lines.enter_context(ctx.scoped_line(next_line))
                ctx.indent[next_line] = -1
                next_line += 1

            ctx.blk_indent = 0
            token = ctx.push(TokenType.BLOCKQUOTE_OPEN, "blockquote", 1)
            token.markup = ">"
            token.map = span = [start, 0]

            ctx.tokenizer.tokenize(ctx, start, next_line)

            token = ctx.push(TokenType.BLOCKQUOTE_CLOSE, "blockquote", -1)
            token.markup = ">"
            span[1] = ctx.line

        return True

    @staticmethod
    def _strip_marker(ctx: ParseContext, line: int, pos: int, max_: int) -> bool:
        """Re-base ``line`` past its ``>`` marker. Returns True if nothing follows."""
        initial = ctx.indent[line] + 1
        adjust_tab = False
        space_after_marker = False

        ch = ctx.char_at(pos)
        if ch == " ":
            pos += 1
            initial += 1
            space_after_marker = True
        elif ch == "\t":
            space_after_marker = True
            if (ctx.tab_base[line] + initial) % TAB_WIDTH == 3:
                pos += 1
                initial += 1
            else:
                # The tab is only partly consumed by the marker's space
                adjust_tab = True

        offset = initial
        ctx.begin[line] = pos
        while pos < max_:
            ch = ctx.src[pos]
            if not is_space(ch):
                break
            if ch == "\t":
                offset += TAB_WIDTH - (offset + ctx.tab_base[line] + (1 if adjust_tab else 0)) % TAB_WIDTH
            else:
                offset += 1
            pos += 1

        ctx.tab_base[line] = ctx.indent[line] + 1 + (1 if space_after_marker else 0)
        ctx.indent[line] = offset - initial
        ctx.shift[line] = pos - ctx.begin[line]
        return pos >= max_


class HrRule:
    """Thematic break: three or more ``*``, ``-`` or ``_``."""

    name: ClassVar[str] = "hr"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        max_ = ctx.end[start]
        if ctx.indent[start] - ctx.blk_indent >= CODE_INDENT:
            return False

        pos = ctx.content_start(start)
        marker = ctx.char_at(pos)
        if marker not in ("*", "-", "_"):
            return False

        count = 0
        while pos < max_:
            ch = ctx.src[pos]
            if ch != marker and not is_space(ch):
                return False
            if ch == marker:
                count += 1
            pos += 1

        if count < 3:
            return False
        if mode is ProbeMode.VALIDATE:
            return True

        ctx.line = start + 1
        token = ctx.push(TokenType.HR, "hr", 0)
        token.map = [start, ctx.line]
        token.markup = marker * count
        return True


class HeadingRule:
    """ATX heading: ``#`` to ``######`` followed by a space."""

    name: ClassVar[str] = "heading"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        pos = ctx.content_start(start)
        max_ = ctx.end[start]

        if ctx.indent[start] - ctx.blk_indent >= CODE_INDENT:
            return False
        if pos >= max_ or ctx.src[pos] != "#":
            return False

        level = 0
        while pos < max_ and ctx.src[pos] == "#":
            level += 1
            pos += 1
        if level > MAX_HEADING_LEVEL or (pos < max_ and not is_space(ctx.src[pos])):
            return False

        if mode is ProbeMode.VALIDATE:
            return True

        # Drop trailing spaces, then an optional closing "###" sequence
        max_ = ctx.skip_spaces_back(max_, pos)
        tmp = ctx.skip_chars_back(max_, "#", pos)
        if tmp > pos and is_space(ctx.src[tmp - 1]):
            max_ = tmp

        ctx.line = start + 1

        token = ctx.push(TokenType.HEADING_OPEN, f"h{level}", 1)
        token.markup = "#" * level
        token.map = [start, ctx.line]

        token = ctx.push(TokenType.INLINE, "", 0)
        token.content = ctx.src[pos:max_].strip()
        token.map = [start, ctx.line]
        token.children = []

        token = ctx.push(TokenType.HEADING_CLOSE, f"h{level}", -1)
        token.markup = "#" * level
        return True


class ParagraphRule:
    """Paragraph: the fallback rule, always matches.

    Runs until a blank line, ``ctx.line_max`` or a line where a rule that
    may interrupt paragraphs matches. Lines indented 4+ columns (or marked
    lazy by an enclosing quote) are continuation text.
    """

    name: ClassVar[str] = "paragraph"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        if mode is ProbeMode.VALIDATE:
            return True

        end = ctx.line_max
        next_line = start + 1

        with ctx.scoped("parent_type"):
            ctx.parent_type = ParentType.PARAGRAPH

            while next_line < end and not ctx.is_empty(next_line):
                # Continuation indented like code is still paragraph text
                if ctx.indent[next_line] - ctx.blk_indent > 3:
                    next_line += 1
                    continue
                # Lazy quote continuation
                if ctx.indent[next_line] < 0:
                    next_line += 1
                    continue
                if _terminated(ctx, ParentType.PARAGRAPH, next_line, end):
                    break
                next_line += 1

            content = ctx.get_lines(start, next_line, ctx.blk_indent, False).strip()
            ctx.line = next_line

            token = ctx.push(TokenType.PARAGRAPH_OPEN, "p", 1)
            token.map = [start, ctx.line]

            token = ctx.push(TokenType.INLINE, "", 0)
            token.content = content
            token.map = [start, ctx.line]
            token.children = []

            ctx.push(TokenType.PARAGRAPH_CLOSE, "p", -1)

        return True
