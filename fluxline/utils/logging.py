"""
Logging setup

Library modules only create module loggers (logging.getLogger(__name__)) and
never configure handlers. Frontends such as the CLI call configure_logging()
once to route records to a Rich handler on stderr.
"""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fluxline"


def configure_logging(level: Union[str, int] = "WARNING") -> logging.Logger:
    """
    Configure the package logger

    Args:
        level: Logging level name (e.g., "DEBUG", "INFO", "WARNING") or number

    Returns:
        The configured "fluxline" logger

    Raises:
        ValueError: If the level name is unknown
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
