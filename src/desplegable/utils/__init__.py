"""Utility helpers for desplegable.

- logger: get_logger for namespaced stdlib logging
"""

from desplegable.utils.logger import get_logger

__all__ = [
    "get_logger",
]
