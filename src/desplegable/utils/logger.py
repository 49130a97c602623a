"""Minimal logging utilities for desplegable.

Example:
    >>> from desplegable.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Tokenizing document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``desplegable`` namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("renderer").name
        'desplegable.renderer'
    """
    if not (name == "desplegable" or name.startswith("desplegable.")):
        name = f"desplegable.{name}"
    return logging.getLogger(name)
