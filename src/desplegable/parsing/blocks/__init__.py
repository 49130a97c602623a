"""Host block rules and the default chain.

Default priority order and the contexts each rule may interrupt:

    code
    fence       paragraph, reference, blockquote, list
    blockquote  paragraph, reference, blockquote, list
    hr          paragraph, reference, blockquote, list
    list        paragraph, reference, blockquote
    heading     paragraph, reference, blockquote
    paragraph
"""

from desplegable.context import ParentType
from desplegable.parsing.blocks.core import (
    BlockquoteRule,
    CodeRule,
    FenceRule,
    HeadingRule,
    HrRule,
    ParagraphRule,
)
from desplegable.parsing.blocks.lists import ListRule, mark_tight_paragraphs
from desplegable.parsing.ruler import RuleChainBuilder

_ALL_CONTAINERS = (
    ParentType.PARAGRAPH,
    ParentType.REFERENCE,
    ParentType.BLOCKQUOTE,
    ParentType.LIST,
)
_NOT_LISTS = (
    ParentType.PARAGRAPH,
    ParentType.REFERENCE,
    ParentType.BLOCKQUOTE,
)


def create_default_rules() -> RuleChainBuilder:
    """Create a builder pre-populated with the host block rules.

    Extend it before building:

        >>> builder = create_default_rules()
        >>> builder.before("fence", MyRule(), alt=(ParentType.PARAGRAPH,))
        >>> chain = builder.build()

    """
    builder = RuleChainBuilder()
    builder.push(CodeRule())
    builder.push(FenceRule(), alt=_ALL_CONTAINERS)
    builder.push(BlockquoteRule(), alt=_ALL_CONTAINERS)
    builder.push(HrRule(), alt=_ALL_CONTAINERS)
    builder.push(ListRule(), alt=_NOT_LISTS)
    builder.push(HeadingRule(), alt=_NOT_LISTS)
    builder.push(ParagraphRule())
    return builder


__all__ = [
    "BlockquoteRule",
    "CodeRule",
    "FenceRule",
    "HeadingRule",
    "HrRule",
    "ListRule",
    "ParagraphRule",
    "create_default_rules",
    "mark_tight_paragraphs",
]
