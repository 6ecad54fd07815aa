"""
Logging configuration for card sort.

Sets up loguru with appropriate levels and formatting.
"""

import sys

from loguru import logger
from typing import Any


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """
    Configure loguru logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: If True, enable debug logging and a debug log file
    """
    logger.remove()
    logger.configure(extra={"component": "card_sort"})

    log_level = "DEBUG" if debug else level

    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>",
    )

    # Session history (INFO and above)
    logger.add(
        "card_sort.log",
        level="INFO",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} | {name}:{function}:{line} - {message}",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )

    if debug:
        logger.add(
            "card_sort_debug.log",
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} | {name}:{function}:{line} - {message}",
            rotation="50 MB",
            retention="3 days",
            compression="zip",
        )


def get_logger(name: str | None = None) -> Any:
    """
    Get a logger instance.

    Args:
        name: Optional component name bound into every record

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(component=name)
    return logger
