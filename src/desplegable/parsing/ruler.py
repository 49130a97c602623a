"""Ordered block rule chain.

Every block construct implements one interface, ``probe(ctx, start, end,
mode)``. The tokenizer walks the chain in priority order; a rule's position
in the chain is its priority. Each rule also names the parent contexts it
may interrupt (``alt``): a paragraph asks the chain for its terminators and
probes them in validate mode to decide where it ends.

The chain is assembled with RuleChainBuilder and frozen with build(), once
per engine. There is no global rule registry.

Example:
    >>> builder = RuleChainBuilder()
    >>> builder.push(ParagraphRule())
    >>> builder.before("paragraph", HeadingRule(), alt=(ParentType.PARAGRAPH,))
    >>> chain = builder.build()
    >>> [rule.name for rule in chain.rules]
    ['heading', 'paragraph']

Thread Safety:
RuleChain is immutable after creation and rules are stateless, so one chain
serves any number of concurrent parses.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from desplegable.context import ParentType

if TYPE_CHECKING:
    from desplegable.context import ParseContext


class ProbeMode(Enum):
    """How a rule is being asked."""

    VALIDATE = auto()  # "would you match here?" No mutation, no tokens.
    COMMIT = auto()  # consume lines and emit tokens, or decline untouched


@runtime_checkable
class BlockRule(Protocol):
    """Protocol for block rules.

    Attributes:
        name: Unique name within a chain, used as an insertion anchor

    Thread Safety:
        Rules must be stateless. All per-parse state lives on the context.
    """

    name: str

    def probe(self, ctx: ParseContext, start: int, end: int, mode: ProbeMode) -> bool:
        """Try to match at line ``start``.

        In VALIDATE mode return whether the rule would match, without
        touching ``ctx``. In COMMIT mode either decline (return False with
        ``ctx`` exactly as on entry) or consume lines, advance ``ctx.line``
        and emit tokens.
        """
        ...


@dataclass(frozen=True, slots=True)
class RuleEntry:
    """A rule plus the parent contexts it may interrupt."""

    rule: BlockRule
    alt: frozenset[ParentType]

    @property
    def name(self) -> str:
        return self.rule.name


class RuleChain:
    """Immutable, priority-ordered rule table.

    Terminator lists per parent context are computed once at construction.
    """

    __slots__ = ("_entries", "_rules", "_terminators")

    def __init__(self, entries: tuple[RuleEntry, ...]) -> None:
        """Initialize the chain. Use RuleChainBuilder to create instances."""
        self._entries = entries
        self._rules = tuple(entry.rule for entry in entries)
        self._terminators = {
            parent: tuple(entry.rule for entry in entries if parent in entry.alt)
            for parent in ParentType
        }

    @property
    def rules(self) -> tuple[BlockRule, ...]:
        """All rules in priority order."""
        return self._rules

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self._entries)

    def terminators(self, parent: ParentType) -> tuple[BlockRule, ...]:
        """Rules that may interrupt a block of type ``parent``, in priority order."""
        return self._terminators[parent]

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self._entries)


class RuleChainBuilder:
    """Mutable builder for RuleChain.

    Raises:
        ValueError: When a rule name is already present
        KeyError: When an insertion anchor is unknown
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[RuleEntry] = []

    def _entry(self, rule: BlockRule, alt: Iterable[ParentType]) -> RuleEntry:
        if not isinstance(rule, BlockRule):
            raise TypeError(f"{type(rule).__name__} does not implement BlockRule")
        if any(entry.name == rule.name for entry in self._entries):
            raise ValueError(f"Block rule '{rule.name}' already registered")
        return RuleEntry(rule=rule, alt=frozenset(alt))

    def _index(self, anchor: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.name == anchor:
                return index
        raise KeyError(f"Unknown block rule: {anchor!r}")

    def push(self, rule: BlockRule, alt: Iterable[ParentType] = ()) -> RuleChainBuilder:
        """Append a rule at the lowest priority."""
        self._entries.append(self._entry(rule, alt))
        return self

    def before(
        self, anchor: str, rule: BlockRule, alt: Iterable[ParentType] = ()
    ) -> RuleChainBuilder:
        """Insert a rule with priority just above ``anchor``."""
        entry = self._entry(rule, alt)
        self._entries.insert(self._index(anchor), entry)
        return self

    def after(
        self, anchor: str, rule: BlockRule, alt: Iterable[ParentType] = ()
    ) -> RuleChainBuilder:
        """Insert a rule with priority just below ``anchor``."""
        entry = self._entry(rule, alt)
        self._entries.insert(self._index(anchor) + 1, entry)
        return self

    def build(self) -> RuleChain:
        """Build the immutable chain."""
        return RuleChain(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
