"""Collapsible blocks and classy lists.

- disclosure: ``+++ Title`` (expanded) / ``>>> Title`` (collapsed) blocks
- classy_list: list rule adding level and expandable styling hints
- render: HTML render rules for the disclosure tokens

Install both rules with the ``collapsible`` plugin.
"""

from desplegable.collapsible.classy_list import (
    CLASSY_LIST_INTERRUPTS,
    ClassyListRule,
    is_expandable_item,
)
from desplegable.collapsible.disclosure import DISCLOSURE_INTERRUPTS, DisclosureRule

__all__ = [
    "CLASSY_LIST_INTERRUPTS",
    "ClassyListRule",
    "DISCLOSURE_INTERRUPTS",
    "DisclosureRule",
    "is_expandable_item",
]
