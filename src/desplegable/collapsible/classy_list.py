"""List rule with styling hints.

Replaces the host list rule (it is registered ahead of it) and parses
exactly the same grammar, adding two hints the renderer turns into CSS
classes:

- ``style_level``: the token nesting level of every list and item
  (``<ul class="lvl-0">``, ``<li class="lvl-1">``)
- ``expandable``: set on items whose first line looks like a disclosure
  opener, e.g. ``- +++ More``. The flag follows the text pattern only; it
  does not depend on whether the item body really forms a disclosure block.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from desplegable.context import ParentType
from desplegable.parsing.blocks.lists import ListRule
from desplegable.parsing.markers import EXPANDABLE_ITEM

if TYPE_CHECKING:
    from desplegable.context import ParseContext
    from desplegable.tokens import Token

# Same contexts the host list may interrupt
CLASSY_LIST_INTERRUPTS = (
    ParentType.PARAGRAPH,
    ParentType.REFERENCE,
    ParentType.BLOCKQUOTE,
)


def is_expandable_item(ctx: ParseContext, line: int) -> bool:
    """Does the item starting at ``line`` open with a disclosure marker?"""
    text = ctx.src[ctx.content_start(line) : ctx.end[line]]
    return EXPANDABLE_ITEM.match(text) is not None


class ClassyListRule(ListRule):
    """Ordered and bullet lists with level and expandable hints."""

    name: ClassVar[str] = "classy_list"

    def open_list(
        self, ctx: ParseContext, ordered: bool, start_value: int, marker_char: str
    ) -> Token:
        token = super().open_list(ctx, ordered, start_value, marker_char)
        token.meta["style_level"] = token.level
        token.attrs["class"] = f"lvl-{token.level}"
        return token

    def open_item(self, ctx: ParseContext, line: int, marker_char: str) -> Token:
        expandable = is_expandable_item(ctx, line)
        token = super().open_item(ctx, line, marker_char)
        token.meta["style_level"] = token.level
        token.meta["expandable"] = expandable
        token.attrs["class"] = f"lvl-{token.level} expandable" if expandable else f"lvl-{token.level}"
        return token
