"""Tests for the public API surface."""

from concurrent.futures import ThreadPoolExecutor

import desplegable
from desplegable import Markdown, Token, TokenType, parse, render


class TestPublicApi:
    """Module-level helpers and exports."""

    def test_version(self) -> None:
        assert desplegable.__version__ == "0.1.0"

    def test_all_exports_exist(self) -> None:
        for name in desplegable.__all__:
            assert hasattr(desplegable, name), name

    def test_parse(self) -> None:
        tokens = parse("+++ A\nb\n+++")
        assert all(isinstance(token, Token) for token in tokens)
        assert [t.type.value for t in tokens][:2] == ["collapsible_open", "collapsible_summary"]

    def test_parse_source_file(self) -> None:
        assert parse("a", source_file="a.md")[0].type is TokenType.PARAGRAPH_OPEN

    def test_render(self) -> None:
        assert render("Hello") == "<p>Hello</p>\n"

    def test_default_engine_cached(self) -> None:
        render("x")
        first = desplegable._DEFAULT_ENGINE
        render("y")
        assert desplegable._DEFAULT_ENGINE is first


class TestMarkdown:
    """The engine object."""

    def test_call_equals_parse_then_render(self) -> None:
        md = Markdown()
        source = "- +++ a\n  b\n- c\n\n>>> d\ne"
        assert md(source) == md.render(md.parse(source))

    def test_env(self) -> None:
        env: dict = {}
        Markdown().parse("a", env)
        assert env == {}

    def test_crlf_input(self) -> None:
        assert Markdown()("+++ T\r\nbody\r\n+++") == Markdown()("+++ T\nbody\n+++")

    def test_parse_returns_fresh_tokens(self) -> None:
        md = Markdown()
        first = md.parse("- a")
        second = md.parse("- a")
        assert first is not second
        assert [t.type for t in first] == [t.type for t in second]

    def test_shared_engine_across_threads(self) -> None:
        md = Markdown()
        sources = [f"+++ Title {i}\n- item {i}\n- +++ x\n+++" for i in range(20)]
        expected = [md(source) for source in sources]
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(md, sources))
        assert results == expected
