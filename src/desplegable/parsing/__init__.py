"""Block parsing machinery.

- ruler: BlockRule protocol, ProbeMode, RuleChain and its builder
- tokenizer: the shared dispatch loop every container recurses into
- inline: phrase parser for paragraph, heading and title text
- markers: list and disclosure marker scanning
- blocks: the host block rules
"""

from desplegable.parsing.inline import InlineParser
from desplegable.parsing.ruler import (
    BlockRule,
    ProbeMode,
    RuleChain,
    RuleChainBuilder,
    RuleEntry,
)
from desplegable.parsing.tokenizer import BlockTokenizer

__all__ = [
    "BlockRule",
    "BlockTokenizer",
    "InlineParser",
    "ProbeMode",
    "RuleChain",
    "RuleChainBuilder",
    "RuleEntry",
]
