"""Token and TokenType definitions for the block event stream.

Block rules append Token objects to the parse context in document order.
Open/close pairs carry ``nesting`` of +1/-1, leaf tokens 0. A block's
``map`` is its ``[start, end)`` line span; rules open it as ``[start, 0]``
and finalize the end once the extent is known.

Thread Safety:
Tokens are mutable while a parse is in flight (spans are finalized and tight
list paragraphs are hidden after the fact). Once ``parse()`` returns, the
stream is owned by the caller and is never touched again by the engine.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TokenType(Enum):
    """Token types produced by block rules and the inline pass."""

    # Host blocks
    PARAGRAPH_OPEN = "paragraph_open"
    PARAGRAPH_CLOSE = "paragraph_close"
    HEADING_OPEN = "heading_open"
    HEADING_CLOSE = "heading_close"
    BLOCKQUOTE_OPEN = "blockquote_open"
    BLOCKQUOTE_CLOSE = "blockquote_close"
    FENCE = "fence"
    CODE_BLOCK = "code_block"
    HR = "hr"
    INLINE = "inline"

    # Lists
    BULLET_LIST_OPEN = "bullet_list_open"
    BULLET_LIST_CLOSE = "bullet_list_close"
    ORDERED_LIST_OPEN = "ordered_list_open"
    ORDERED_LIST_CLOSE = "ordered_list_close"
    LIST_ITEM_OPEN = "list_item_open"
    LIST_ITEM_CLOSE = "list_item_close"

    # Disclosure blocks
    COLLAPSIBLE_OPEN = "collapsible_open"
    COLLAPSIBLE_SUMMARY = "collapsible_summary"
    COLLAPSIBLE_CLOSE = "collapsible_close"

    # Inline children
    TEXT = "text"
    SOFTBREAK = "softbreak"
    HARDBREAK = "hardbreak"
    CODE_INLINE = "code_inline"
    EM_OPEN = "em_open"
    EM_CLOSE = "em_close"
    STRONG_OPEN = "strong_open"
    STRONG_CLOSE = "strong_close"


LIST_OPEN_TYPES = frozenset({TokenType.BULLET_LIST_OPEN, TokenType.ORDERED_LIST_OPEN})


@dataclass(slots=True)
class Token:
    """A single block or inline event.

    Attributes:
        type: The token type
        tag: HTML tag name the renderer emits by default
        nesting: +1 opens a block, -1 closes it, 0 is self-contained
        map: ``[start, end)`` line span, None for inline tokens
        level: Nesting level at which the token was emitted
        markup: Source markup (marker run, fence, bullet glyph)
        info: Fence info string, ordered marker number or disclosure title
        content: Raw text content
        children: Inline tokens for ``inline`` and ``collapsible_summary``
        block: True for block-level tokens
        hidden: Suppressed by the renderer (tight list paragraphs)
        attrs: HTML attributes
        meta: Style hints (``expanded``, ``style_level``, ``expandable``)

    """

    type: TokenType
    tag: str
    nesting: int
    map: list[int] | None = None
    level: int = 0
    markup: str = ""
    info: str = ""
    content: str = ""
    children: list[Token] | None = None
    block: bool = False
    hidden: bool = False
    attrs: dict[str, str] = field(default_factory=dict)
    meta: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        extra = ""
        if self.content:
            val = self.content if len(self.content) <= 20 else self.content[:17] + "..."
            extra = f", {val!r}"
        return f"Token({self.type.value}{extra}, map={self.map}, level={self.level})"
