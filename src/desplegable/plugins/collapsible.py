"""Collapsible plugin.

Adds disclosure blocks and the classy list rule:

    +++ My Section (which starts OPEN)
    - one
    - >>> two (an expandable item)
        nested
    - three
    +++

Rule placement:
- ``collapsible`` goes before ``fence`` and may interrupt paragraphs,
  references, block quotes and lists
- ``classy_list`` goes before ``list`` and takes over all list syntax

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from desplegable.collapsible import (
    CLASSY_LIST_INTERRUPTS,
    DISCLOSURE_INTERRUPTS,
    ClassyListRule,
    DisclosureRule,
)
from desplegable.collapsible.render import (
    render_collapsible_close,
    render_collapsible_open,
    render_collapsible_summary,
)
from desplegable.plugins import register_plugin
from desplegable.tokens import TokenType

if TYPE_CHECKING:
    from desplegable.parsing.ruler import RuleChainBuilder
    from desplegable.renderers.html import HtmlRenderer


@register_plugin("collapsible")
class CollapsiblePlugin:
    """Plugin for ``+++``/``>>>`` disclosure blocks and classy lists."""

    @property
    def name(self) -> str:
        return "collapsible"

    def extend_rules(self, builder: RuleChainBuilder) -> None:
        builder.before("fence", DisclosureRule(), alt=DISCLOSURE_INTERRUPTS)
        builder.before("list", ClassyListRule(), alt=CLASSY_LIST_INTERRUPTS)

    def extend_renderer(self, renderer: HtmlRenderer) -> None:
        renderer.add_rule(TokenType.COLLAPSIBLE_OPEN, render_collapsible_open)
        renderer.add_rule(TokenType.COLLAPSIBLE_SUMMARY, render_collapsible_summary)
        renderer.add_rule(TokenType.COLLAPSIBLE_CLOSE, render_collapsible_close)
