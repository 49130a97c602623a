"""Disclosure (collapsible) block rule.

A run of three or more ``+`` or ``>`` followed by a title opens a block that
renders as a togglable ``<details>`` element. ``+`` starts expanded, ``>``
starts collapsed. The block closes at a line holding a run of the same
glyph at least as long as the opener:

    +++ Section title
    Any block content, including lists and nested disclosures.
    +++

Without a closing line the block auto-closes at the end of the enclosing
scope. A block whose body holds no text declines, and the opening line is
retried as ordinary content.

Thread Safety:
Stateless rule. Safe for concurrent use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from desplegable.context import ParentType
from desplegable.parsing.blocks.core import CODE_INDENT
from desplegable.parsing.markers import MIN_RUN, MarkerRun, is_blank_range, marker_run
from desplegable.parsing.ruler import ProbeMode
from desplegable.tokens import TokenType
from desplegable.utils.logger import get_logger

if TYPE_CHECKING:
    from desplegable.context import ParseContext

logger = get_logger(__name__)

# Contexts a disclosure block may interrupt
DISCLOSURE_INTERRUPTS = (
    ParentType.PARAGRAPH,
    ParentType.REFERENCE,
    ParentType.BLOCKQUOTE,
    ParentType.LIST,
)


class DisclosureRule:
    """Recognizes ``+++ Title`` / ``>>> Title`` blocks."""

    name: ClassVar[str] = "collapsible"

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        if ctx.indent[start] - ctx.blk_indent >= CODE_INDENT:
            return False

        opener = marker_run(ctx, ctx.content_start(start))
        if opener is None or opener.length < MIN_RUN:
            return False

        max_ = ctx.end[start]
        if is_blank_range(ctx, opener.end, max_):
            return False
        title = ctx.src[opener.end : max_].strip()
        # "+++ Title +++" would open and close on one line
        if title.endswith(opener.markup):
            return False

        if mode is ProbeMode.VALIDATE:
            return True

        close_line, closer, has_body = self._scan_body(ctx, opener, start, end)
        if not has_body:
            return False

        span_end = close_line + 1 if closer is not None else close_line
        if closer is None:
            logger.debug("Auto-closing disclosure block opened at line %d", start + 1)

        token = ctx.push(TokenType.COLLAPSIBLE_OPEN, "details", 1)
        token.info = title
        token.markup = opener.markup
        token.meta["expanded"] = opener.expanded
        token.map = [start, span_end]

        token = ctx.push(TokenType.COLLAPSIBLE_SUMMARY, "summary", 0)
        token.content = title
        token.children = ctx.inline.parse(title)
        token.map = [start, start + 1]

        with ctx.scoped("parent_type", "line_max"):
            ctx.parent_type = ParentType.REFERENCE
            # Lazy paragraph continuation must not run past the closing line
            ctx.line_max = close_line
            ctx.tokenizer.tokenize(ctx, start + 1, close_line)

        token = ctx.push(TokenType.COLLAPSIBLE_CLOSE, "details", -1)
        token.markup = closer.markup if closer is not None else ""

        ctx.line = span_end
        return True

    @staticmethod
    def _scan_body(
        ctx: ParseContext, opener: MarkerRun, start: int, end: int
    ) -> tuple[int, MarkerRun | None, bool]:
        """Find the closing line.

        Returns:
            (closing line or scope boundary, closing run or None if the block
            auto-closes, whether any non-blank body line was seen)
        """
        has_body = False
        next_line = start + 1

        while next_line < end:
            pos = ctx.content_start(next_line)
            max_ = ctx.end[next_line]

            # Non-empty line with negative indent ends the enclosing scope
            if pos < max_ and ctx.indent[next_line] < ctx.blk_indent:
                break

            closer = None
            if ctx.indent[next_line] - ctx.blk_indent < CODE_INDENT:
                closer = marker_run(ctx, pos, opener.glyph)
            if (
                closer is not None
                and closer.closes(opener)
                and ctx.skip_spaces(closer.end) >= max_
            ):
                return next_line, closer, has_body

            if pos < max_:
                has_body = True
            next_line += 1

        return next_line, None, has_body
