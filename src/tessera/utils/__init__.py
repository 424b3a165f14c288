"""Utility modules for tessera.

Provides:
- logger: get_logger for namespaced logging
"""

from tessera.utils.logger import get_logger

__all__ = [
    "get_logger",
]
