"""Tests for the shared tokenizer and the host block rules."""

from typing import ClassVar

import pytest

from desplegable import LineTable, Markdown, NestingDepthError, ParseError
from desplegable.parsing import BlockTokenizer, ProbeMode, RuleChainBuilder
from desplegable.parsing.blocks import CodeRule, ParagraphRule
from desplegable.tokens import TokenType


def types(tokens) -> list[str]:
    return [token.type.value for token in tokens]


class StuckRule:
    """Claims every line without consuming it."""

    name: ClassVar[str] = "stuck"

    def probe(self, ctx, start, end, mode: ProbeMode) -> bool:
        return True


class TestHostBlocks:
    """Host rules produce markdown-it style token streams."""

    def test_paragraphs_split_on_blank_line(self, md: Markdown) -> None:
        tokens = md.parse("one\ntwo\n\nthree")
        assert types(tokens) == [
            "paragraph_open",
            "inline",
            "paragraph_close",
            "paragraph_open",
            "inline",
            "paragraph_close",
        ]
        assert tokens[1].content == "one\ntwo"
        assert tokens[0].map == [0, 2]
        assert tokens[3].map == [3, 4]

    def test_heading(self, md: Markdown) -> None:
        tokens = md.parse("## Title ##")
        assert types(tokens) == ["heading_open", "inline", "heading_close"]
        assert tokens[0].tag == "h2"
        assert tokens[1].content == "Title"

    def test_heading_needs_space(self, md: Markdown) -> None:
        assert types(md.parse("#hashtag"))[0] == "paragraph_open"

    def test_fence(self, md: Markdown) -> None:
        tokens = md.parse("```python\nx = 1\n```\nafter")
        assert tokens[0].type is TokenType.FENCE
        assert tokens[0].info == "python"
        assert tokens[0].content == "x = 1\n"
        assert tokens[0].map == [0, 3]
        assert tokens[1].type is TokenType.PARAGRAPH_OPEN

    def test_unclosed_fence_runs_to_end(self, md: Markdown) -> None:
        tokens = md.parse("~~~\na\nb")
        assert len(tokens) == 1
        assert tokens[0].content == "a\nb"

    def test_indented_code(self, md: Markdown) -> None:
        tokens = md.parse("    code\n\n    more")
        assert tokens[0].type is TokenType.CODE_BLOCK
        assert tokens[0].content == "code\n\nmore\n"

    def test_hr(self, md: Markdown) -> None:
        tokens = md.parse("* * *")
        assert tokens[0].type is TokenType.HR
        assert tokens[0].markup == "***"

    def test_hr_interrupts_paragraph(self, md: Markdown) -> None:
        assert types(md.parse("text\n___")) == [
            "paragraph_open",
            "inline",
            "paragraph_close",
            "hr",
        ]

    def test_blockquote_with_lazy_line(self, md: Markdown) -> None:
        tokens = md.parse("> quoted\nlazy")
        assert types(tokens) == [
            "blockquote_open",
            "paragraph_open",
            "inline",
            "paragraph_close",
            "blockquote_close",
        ]
        assert tokens[2].content == "quoted\nlazy"
        assert tokens[0].map == [0, 2]

    def test_blank_line_ends_blockquote(self, md: Markdown) -> None:
        tokens = md.parse("> a\n\nb")
        assert types(tokens)[:5] == [
            "blockquote_open",
            "paragraph_open",
            "inline",
            "paragraph_close",
            "blockquote_close",
        ]
        assert tokens[-2].content == "b"

    def test_empty_document(self, md: Markdown) -> None:
        assert md.parse("") == []
        assert md.parse("\n\n  \n") == []

    def test_inline_children_filled(self, md: Markdown) -> None:
        tokens = md.parse("*hi* there")
        assert types(tokens[1].children) == ["em_open", "text", "em_close", "text"]


class TestTokenizerErrors:
    """Conditions that make the parse unsound raise."""

    def test_nesting_limit_lists(self) -> None:
        md = Markdown(max_nesting=3)
        with pytest.raises(NestingDepthError) as exc_info:
            md.parse("- a\n  - b\n    - c")
        assert exc_info.value.limit == 3
        assert exc_info.value.depth == 4
        assert exc_info.value.lineno == 2

    def test_nesting_limit_blockquotes(self) -> None:
        md = Markdown(max_nesting=5)
        md.parse(">>>> a")
        with pytest.raises(NestingDepthError):
            md.parse("> > > > > > a")

    def test_stack_exhaustion_raises_nesting_error(self) -> None:
        md = Markdown(max_nesting=100_000)
        with pytest.raises(NestingDepthError) as exc_info:
            md.parse(">" * 20_000 + " x", source_file="deep.md")
        err = exc_info.value
        assert err.limit == 100_000
        assert 0 < err.depth < 100_000
        assert err.lineno == 1
        assert err.source_file == "deep.md"
        assert isinstance(err.__cause__, RecursionError)

    def test_engine_usable_after_stack_exhaustion(self) -> None:
        md = Markdown(max_nesting=100_000)
        with pytest.raises(NestingDepthError):
            md.parse("> " * 20_000 + "x")
        assert md("> a") == "<blockquote>\n<p>a</p>\n</blockquote>\n"

    def test_nesting_error_carries_source_file(self) -> None:
        md = Markdown(max_nesting=1)
        with pytest.raises(NestingDepthError) as exc_info:
            md.parse("> a", source_file="doc.md")
        assert exc_info.value.source_file == "doc.md"
        assert str(exc_info.value).startswith("doc.md:1 ")

    def test_default_limit_allows_deep_documents(self, md: Markdown) -> None:
        source = "".join("  " * depth + "- item\n" for depth in range(20))
        tokens = md.parse(source)
        assert max(token.level for token in tokens) < 100

    def test_rule_that_does_not_advance(self) -> None:
        tokenizer = BlockTokenizer(RuleChainBuilder().push(StuckRule()).build())
        with pytest.raises(ParseError, match="did not advance") as exc_info:
            tokenizer.parse("x")
        assert exc_info.value.lineno == 1

    def test_no_rule_matches(self) -> None:
        tokenizer = BlockTokenizer(RuleChainBuilder().push(CodeRule()).build())
        with pytest.raises(ParseError, match="no block rule matched"):
            tokenizer.parse("plain")


class TestTokenizerState:
    """The tokenizer leaves the root context as it found it."""

    def test_context_restored(self, tokenizer, make_context) -> None:
        source = "- a\n  > b\n  +++ c\n  d\n  +++\n\n1. e\n\n   f"
        ctx = make_context(source)
        tokenizer.tokenize(ctx, 0, ctx.line_max)
        assert ctx.blk_indent == 0
        assert ctx.list_indent is None
        assert ctx.level == 0
        assert ctx.line_max == ctx.table.line_count
        assert ctx.begin == list(ctx.table.begin)
        assert ctx.shift == list(ctx.table.shift)
        assert ctx.indent == list(ctx.table.indent)

    def test_paragraph_only_chain(self) -> None:
        tokenizer = BlockTokenizer(RuleChainBuilder().push(ParagraphRule()).build())
        assert types(tokenizer.parse("- a\n# b")) == [
            "paragraph_open",
            "inline",
            "paragraph_close",
        ]

    def test_env_is_exposed(self, tokenizer) -> None:
        env = {"seen": True}
        ctx = tokenizer.new_context(LineTable.from_source("a"), env)
        assert ctx.env is env
