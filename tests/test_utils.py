"""Tests for utility helpers."""

import logging

from desplegable import Markdown
from desplegable.utils import get_logger


class TestGetLogger:
    """Namespaced loggers."""

    def test_prefixes_namespace(self) -> None:
        assert get_logger("renderer").name == "desplegable.renderer"

    def test_keeps_package_names(self) -> None:
        assert get_logger("desplegable.parsing").name == "desplegable.parsing"
        assert get_logger("desplegable").name == "desplegable"

    def test_returns_stdlib_logger(self) -> None:
        assert isinstance(get_logger("x"), logging.Logger)

    def test_parse_summary_logged(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="desplegable")
        Markdown().parse("a\nb")
        assert any(
            r.name == "desplegable.parsing.tokenizer" and "Tokenized 2 lines" in r.getMessage()
            for r in caplog.records
        )
