"""Render rules for disclosure blocks.

    <details class="collapsible" open>
    <summary><span class="pre-summary">&nbsp;</span>Title</summary>
    ...body...
    </details>

``+`` blocks carry the ``open`` attribute, ``>`` blocks start collapsed.
The spacer span ahead of the title is a styling hook for the toggle glyph.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from desplegable.renderers.html import HtmlRenderer
    from desplegable.tokens import Token

DETAILS_CLASS = "collapsible"
SUMMARY_SPACER = '<span class="pre-summary">&nbsp;</span>'


def render_collapsible_open(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    open_attr = " open" if tokens[idx].meta.get("expanded") else ""
    return f'<details class="{DETAILS_CLASS}"{open_attr}>\n'


def render_collapsible_summary(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    title = renderer.render_inline(tokens[idx].children or ())
    return f"<summary>{SUMMARY_SPACER}{title}</summary>\n"


def render_collapsible_close(tokens: Sequence[Token], idx: int, renderer: HtmlRenderer) -> str:
    return "</details>\n"
