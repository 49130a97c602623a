"""HTML renderer over the token stream.

Walks the finalized token stream once. Each token type may have a render
rule; tokens without one go through ``render_token``, which emits the
token's tag and attributes. Plugins add rules for their own token types via
``add_rule``.

Thread Safety:
Rule tables are filled when the owning Markdown instance is built and only
read afterwards. render() keeps all per-call state in locals, so one
renderer can serve concurrent calls.
"""

from __future__ import annotations

import html
from collections.abc import Callable, Sequence

from desplegable.config import get_parse_config
from desplegable.errors import RenderError
from desplegable.tokens import Token, TokenType

RenderRule = Callable[[Sequence[Token], int, "HtmlRenderer"], str]


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    Escapes <, >, &, " but not single quotes.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


def _render_code_block(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    return f"<pre><code>{html_escape(tokens[idx].content)}</code></pre>\n"


def _render_fence(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    token = tokens[idx]
    lang = token.info.split(maxsplit=1)[0] if token.info else ""
    class_attr = f' class="language-{html_escape(lang)}"' if lang else ""
    return f"<pre><code{class_attr}>{html_escape(token.content)}</code></pre>\n"


def _render_text(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    return html_escape(tokens[idx].content)


def _render_code_inline(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    return f"<code>{html_escape(tokens[idx].content)}</code>"


def _render_hardbreak(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    return "<br />\n"


def _render_softbreak(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    return "<br />\n" if get_parse_config().breaks else "\n"


DEFAULT_RULES: dict[TokenType, RenderRule] = {
    TokenType.CODE_BLOCK: _render_code_block,
    TokenType.FENCE: _render_fence,
    TokenType.TEXT: _render_text,
    TokenType.CODE_INLINE: _render_code_inline,
    TokenType.HARDBREAK: _render_hardbreak,
    TokenType.SOFTBREAK: _render_softbreak,
}


class HtmlRenderer:
    """Renders a token stream to HTML.

    Usage:
        >>> renderer = HtmlRenderer()
        >>> renderer.render(tokens)
        '<p>Hello</p>\\n'

    """

    __slots__ = ("_rules",)

    def __init__(self) -> None:
        self._rules: dict[TokenType, RenderRule] = dict(DEFAULT_RULES)

    def add_rule(self, type_: TokenType, rule: RenderRule) -> None:
        """Install (or replace) the render rule for ``type_``."""
        self._rules[type_] = rule

    def has_rule(self, type_: TokenType) -> bool:
        return type_ in self._rules

    def render(self, tokens: Sequence[Token]) -> str:
        """Render block tokens (and their inline children) to HTML."""
        parts: list[str] = []
        for idx, token in enumerate(tokens):
            if token.type is TokenType.INLINE:
                parts.append(self.render_inline(token.children or ()))
                continue
            rule = self._rules.get(token.type)
            parts.append(rule(tokens, idx, self) if rule else self.render_token(tokens, idx))
        return "".join(parts)

    def render_inline(self, children: Sequence[Token]) -> str:
        """Render a run of inline tokens."""
        parts: list[str] = []
        for idx, token in enumerate(children):
            rule = self._rules.get(token.type)
            parts.append(rule(children, idx, self) if rule else self.render_token(children, idx))
        return "".join(parts)

    def render_token(self, tokens: Sequence[Token], idx: int) -> str:
        """Default rendering: the token's own tag and attributes."""
        token = tokens[idx]
        if token.hidden:
            return ""
        if not token.tag:
            raise RenderError(f"No render rule for token type '{token.type.value}'")

        result = ""
        # A hidden paragraph leaves no newline of its own before the next block
        if token.block and token.nesting != -1 and idx and tokens[idx - 1].hidden:
            result += "\n"

        result += ("</" if token.nesting == -1 else "<") + token.tag
        result += self.render_attrs(token)

        need_lf = False
        if token.block:
            need_lf = True
            if token.nesting == 1 and idx + 1 < len(tokens):
                next_token = tokens[idx + 1]
                if next_token.type is TokenType.INLINE or next_token.hidden:
                    need_lf = False
                elif next_token.nesting == -1 and next_token.tag == token.tag:
                    need_lf = False

        return result + (">\n" if need_lf else ">")

    @staticmethod
    def render_attrs(token: Token) -> str:
        return "".join(f' {html_escape(k)}="{html_escape(v)}"' for k, v in token.attrs.items())
