"""
desplegable: collapsible blocks and classy lists for Markdown.

A line-oriented block parser that adds togglable disclosure blocks and
styled lists to a CommonMark-style block grammar.

Quick Start:
    >>> from desplegable import render
    >>> print(render("+++ Details\\nHidden text\\n+++"))
    <details class="collapsible" open>
    <summary><span class="pre-summary">&nbsp;</span>Details</summary>
    <p>Hidden text</p>
    </details>

    >>> # Or build an engine with explicit options
    >>> from desplegable import Markdown
    >>> md = Markdown(max_nesting=20)
    >>> tokens = md.parse(">>> Closed by default\\nbody")
    >>> tokens[0].meta["expanded"]
    False

Syntax:
    +++ Title     block starts expanded, closes at a line of "+++"
    >>> Title     block starts collapsed, closes at a line of ">>>"
    - +++ Title   list item flagged "expandable" for styling

Installation:
    pip install desplegable
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from desplegable.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from desplegable.context import ParentType, ParseContext
from desplegable.errors import (
    DesplegableError,
    NestingDepthError,
    ParseError,
    PluginError,
    RenderError,
)
from desplegable.lines import Line, LineTable
from desplegable.parsing import (
    BlockRule,
    BlockTokenizer,
    InlineParser,
    ProbeMode,
    RuleChain,
    RuleChainBuilder,
)
from desplegable.parsing.blocks import create_default_rules
from desplegable.plugins import DesplegablePlugin, apply_plugins
from desplegable.renderers.html import HtmlRenderer
from desplegable.tokens import Token, TokenType

__version__ = "0.1.0"

DEFAULT_PLUGINS = ("collapsible",)


class Markdown:
    """Block parser and renderer with a fixed rule chain.

    The rule chain and renderer are built once, in ``__init__``; plugins
    insert their rules at that point and never afterwards.

    Usage:
        >>> md = Markdown()
        >>> html = md("- one\\n- two")
        >>> tokens = md.parse("+++ Title\\nbody\\n+++")
        >>> md.render(tokens)

    Thread Safety:
        Uses ContextVar for thread-local configuration and a fresh
        ParseContext per call. Safe to share one instance across threads.

    """

    __slots__ = ("_config", "_tokenizer", "_renderer", "_plugins")

    def __init__(
        self,
        *,
        plugins: Iterable[str | DesplegablePlugin] | None = DEFAULT_PLUGINS,
        max_nesting: int | None = None,
        breaks: bool | None = None,
        config: ParseConfig | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            plugins: Plugin names or instances; ``["all"]`` enables every
                built-in plugin and None or ``[]`` leaves only host rules
            max_nesting: Maximum block nesting level (overrides ``config``)
            breaks: Render soft line breaks as ``<br />`` (overrides ``config``)
            config: Base configuration

        Raises:
            PluginError: Unknown plugin or a rule insertion that failed
        """
        base = config or ParseConfig()
        self._config = ParseConfig(
            max_nesting=max_nesting if max_nesting is not None else base.max_nesting,
            breaks=breaks if breaks is not None else base.breaks,
        )

        builder = create_default_rules()
        self._renderer = HtmlRenderer()
        self._plugins = tuple(apply_plugins(plugins or (), builder, self._renderer))
        self._tokenizer = BlockTokenizer(builder.build())

    @property
    def config(self) -> ParseConfig:
        return self._config

    @property
    def plugins(self) -> tuple[str, ...]:
        """Names of the applied plugins."""
        return self._plugins

    @property
    def rules(self) -> RuleChain:
        """The frozen rule chain, in priority order."""
        return self._tokenizer.chain

    @property
    def renderer(self) -> HtmlRenderer:
        return self._renderer

    def __call__(self, source: str) -> str:
        """Parse and render Markdown in one call."""
        return self.render(self.parse(source))

    def parse(
        self,
        source: str,
        env: dict[str, Any] | None = None,
        *,
        source_file: str | None = None,
    ) -> list[Token]:
        """Parse Markdown source into a token stream.

        Args:
            source: Markdown source text
            env: Optional per-document environment
            source_file: Optional source file path for error messages

        Returns:
            Finalized token stream

        Raises:
            NestingDepthError: Block nesting reached ``max_nesting``
        """
        with parse_config_context(self._config):
            return self._tokenizer.parse(source, env, source_file)

    def render(self, tokens: list[Token]) -> str:
        """Render a token stream to HTML."""
        with parse_config_context(self._config):
            return self._renderer.render(tokens)


# Cached default engine. Immutable after construction, so safe to share.
_DEFAULT_ENGINE: Markdown | None = None


def _default_engine() -> Markdown:
    global _DEFAULT_ENGINE
    if _DEFAULT_ENGINE is None:
        _DEFAULT_ENGINE = Markdown()
    return _DEFAULT_ENGINE


def parse(source: str, *, source_file: str | None = None) -> list[Token]:
    """Parse Markdown source into tokens with the default engine.

    Example:
        >>> [t.type.value for t in parse("+++ A\\nb\\n+++")][:2]
        ['collapsible_open', 'collapsible_summary']
    """
    return _default_engine().parse(source, source_file=source_file)


def render(source: str) -> str:
    """Parse and render Markdown source with the default engine."""
    return _default_engine()(source)


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # Core API
    "Markdown",
    "parse",
    "render",
    # Tokens
    "Token",
    "TokenType",
    # Parsing
    "BlockRule",
    "BlockTokenizer",
    "InlineParser",
    "Line",
    "LineTable",
    "ParentType",
    "ParseContext",
    "ProbeMode",
    "RuleChain",
    "RuleChainBuilder",
    "create_default_rules",
    # Rendering
    "HtmlRenderer",
    # Configuration (ContextVar-based)
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Errors
    "DesplegableError",
    "NestingDepthError",
    "ParseError",
    "PluginError",
    "RenderError",
]
