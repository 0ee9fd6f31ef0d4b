"""
Logger construction for SpecBridge.

Components take a ``logging.Logger`` at construction instead of reaching
for a module-level singleton. The CLI configures the root handler once and
hands the same logger to the engine, the adapters and the state manager.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "specbridge"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """
    Configure root logging on stderr.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def get_logger(verbose: bool = False, name: str = LOGGER_NAME) -> logging.Logger:
    """
    Build the logger passed to SpecBridge components.

    Args:
        verbose: If True, the logger emits DEBUG records, otherwise WARNING and up
        name: Logger name

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
