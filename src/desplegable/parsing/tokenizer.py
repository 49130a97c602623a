"""Shared block tokenizer.

The dispatch loop every container calls back into for its nested content:
given a line range, skip blank lines, try each rule of the chain in commit
mode and let the first match consume lines. Lists and disclosure blocks
recurse through ``tokenize`` for their bodies, so recursion depth follows
input nesting and is capped by ``ParseConfig.max_nesting``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from desplegable.config import get_parse_config
from desplegable.context import ParseContext
from desplegable.errors import NestingDepthError, ParseError
from desplegable.lines import LineTable
from desplegable.parsing.inline import InlineParser
from desplegable.parsing.ruler import ProbeMode
from desplegable.utils.logger import get_logger

if TYPE_CHECKING:
    from desplegable.parsing.ruler import RuleChain
    from desplegable.tokens import Token

logger = get_logger(__name__)


class BlockTokenizer:
    """Runs a rule chain over line ranges.

    Thread Safety:
        Holds only the immutable chain and a stateless inline parser. Each
        call to parse() creates its own ParseContext.
    """

    __slots__ = ("_chain", "_inline")

    def __init__(self, chain: RuleChain, inline: InlineParser | None = None) -> None:
        self._chain = chain
        self._inline = inline or InlineParser()

    @property
    def chain(self) -> RuleChain:
        return self._chain

    @property
    def inline(self) -> InlineParser:
        return self._inline

    def parse(
        self,
        source: str,
        env: dict[str, Any] | None = None,
        source_file: str | None = None,
    ) -> list[Token]:
        """Tokenize a whole document and run the inline pass.

        Args:
            source: Markdown source text
            env: Optional per-document environment, exposed as ``ctx.env``
            source_file: Optional source path for error messages

        Returns:
            The finalized token stream

        Raises:
            NestingDepthError: Block nesting reached ``max_nesting``, or
                the interpreter stack ran out first
        """
        table = LineTable.from_source(source)
        ctx = self.new_context(table, env, source_file)
        try:
            self.tokenize(ctx, 0, ctx.line_max)
        except RecursionError as e:
            raise NestingDepthError(
                lineno=ctx.line + 1,
                depth=ctx.level,
                limit=get_parse_config().max_nesting,
                source_file=ctx.source_file,
            ) from e
        self._inline.process(ctx.tokens)
        logger.debug("Tokenized %d lines into %d tokens", table.line_count, len(ctx.tokens))
        return ctx.tokens

    def new_context(
        self,
        table: LineTable,
        env: dict[str, Any] | None = None,
        source_file: str | None = None,
    ) -> ParseContext:
        """Create a fresh context bound to this tokenizer."""
        return ParseContext(table, self, self._inline, env, source_file)

    def tokenize(self, ctx: ParseContext, start: int, end: int) -> None:
        """Tokenize lines ``[start, end)`` into ``ctx.tokens``.

        Stops early at a line indented below ``ctx.blk_indent``: that line
        belongs to an enclosing container.
        """
        rules = self._chain.rules
        max_nesting = get_parse_config().max_nesting
        line = start
        has_empty_lines = False

        while line < end:
            ctx.line = line = ctx.skip_empty_lines(line)
            if line >= end:
                break

            if ctx.indent[line] < ctx.blk_indent:
                break

            if ctx.level >= max_nesting:
                raise NestingDepthError(
                    lineno=line + 1,
                    depth=ctx.level,
                    limit=max_nesting,
                    source_file=ctx.source_file,
                )

            prev_line = ctx.line
            for rule in rules:
                if rule.probe(ctx, line, end, ProbeMode.COMMIT):
                    if prev_line >= ctx.line:
                        raise ParseError(
                            f"block rule '{rule.name}' did not advance past the line",
                            lineno=line + 1,
                            source_file=ctx.source_file,
                        )
                    break
            else:
                raise ParseError(
                    "no block rule matched", lineno=line + 1, source_file=ctx.source_file
                )

            # A blank line between two blocks makes the enclosing item loose
            ctx.tight = not has_empty_lines
            if ctx.is_empty(ctx.line - 1):
                has_empty_lines = True

            line = ctx.line
            if line < end and ctx.is_empty(line):
                has_empty_lines = True
                line += 1
                ctx.line = line
