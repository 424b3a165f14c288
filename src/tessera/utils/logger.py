"""Minimal logging utilities for tessera.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from tessera.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Parsing document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "tessera." prefix.
    The library never attaches handlers; configuring output is left to
    the application (the CLI does it from ``--log-level``).

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'tessera.mymodule'
    """
    if not (name == "tessera" or name.startswith("tessera.")):
        name = f"tessera.{name}"
    return logging.getLogger(name)
