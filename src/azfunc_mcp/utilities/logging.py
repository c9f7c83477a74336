"""Logging utilities for azfunc-mcp."""

from __future__ import annotations

import logging
from typing import Any, Literal

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAMESPACE = "azfunc_mcp"


def get_logger(name: str) -> logging.Logger:
    """Get a logger nested under the azfunc_mcp namespace.

    Args:
        name: the name of the logger, usually ``__name__``

    Returns:
        a configured logger instance
    """
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | int = "INFO",
    logger: logging.Logger | None = None,
    enable_rich_tracebacks: bool = True,
    **rich_kwargs: Any,
) -> None:
    """Configure logging for azfunc-mcp.

    Args:
        level: the log level to use
        logger: the logger to configure, defaults to the package logger
        enable_rich_tracebacks: whether to render exceptions with rich
        rich_kwargs: additional keyword arguments for ``RichHandler``
    """
    if logger is None:
        logger = logging.getLogger(LOGGER_NAMESPACE)

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=enable_rich_tracebacks,
        **rich_kwargs,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.setLevel(level)

    # Replace any handler installed by a previous call
    for existing in logger.handlers[:]:
        logger.removeHandler(existing)

    logger.addHandler(handler)
    logger.propagate = False
