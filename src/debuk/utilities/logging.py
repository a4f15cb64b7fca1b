"""Logging utilities for debuk."""

import logging
from typing import Literal

# Library code only configures its own namespace logger, never the root logger.
_DEBUK_LOGGER_NAME = "debuk"


def get_logger(name: str) -> logging.Logger:
    """Get a logger nested under the debuk namespace.

    Args:
        name: The name of the logger. Names outside the ``debuk`` namespace
            are prefixed with ``debuk.``.

    Returns:
        A logger instance.
    """
    if name != _DEBUK_LOGGER_NAME and not name.startswith(f"{_DEBUK_LOGGER_NAME}."):
        name = f"{_DEBUK_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None,
) -> None:
    """Configure logging for debuk.

    Configures only the ``debuk`` namespace logger so that application-level
    logging configuration is not overridden.

    Args:
        level: The log level to use, ``DEBUK_LOG_LEVEL`` by default.
    """
    if level is None:
        from debuk.options import get_settings

        level = get_settings().log_level

    debuk_logger = logging.getLogger(_DEBUK_LOGGER_NAME)
    debuk_logger.setLevel(level)

    # Avoid adding duplicate handlers on repeated calls.
    if debuk_logger.handlers:
        return

    try:
        from rich.console import Console
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
    except ImportError:  # pragma: no cover
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))

    debuk_logger.addHandler(handler)
