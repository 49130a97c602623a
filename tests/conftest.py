"""Shared fixtures."""

from __future__ import annotations

import pytest

from desplegable import Markdown
from desplegable.config import reset_parse_config
from desplegable.lines import LineTable
from desplegable.parsing import BlockTokenizer


@pytest.fixture
def md() -> Markdown:
    return Markdown()


@pytest.fixture
def tokenizer(md: Markdown) -> BlockTokenizer:
    """Tokenizer over the default chain with the collapsible plugin."""
    return BlockTokenizer(md.rules)


@pytest.fixture
def make_context(tokenizer: BlockTokenizer):
    """Build a fresh ParseContext for a source string."""

    def factory(source: str):
        return tokenizer.new_context(LineTable.from_source(source))

    return factory


@pytest.fixture(autouse=True)
def _reset_config():
    yield
    reset_parse_config()

