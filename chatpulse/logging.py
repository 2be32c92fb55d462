"""Logging configuration for chatpulse.

Provides a ``chatpulse.<component>`` logger hierarchy with console output and
optional file output.
"""

import logging
import sys
from pathlib import Path

from . import config


def setup_logging(
    name: str,
    level: int | str | None = None,
    log_dir: Path | None = None,
    console: bool = True,
) -> logging.Logger:
    """Configure logging for a chatpulse component.

    Args:
        name: Logger name (used for the log filename when ``log_dir`` is set)
        level: Logging level (defaults to ``LOG_LEVEL`` from the environment)
        log_dir: Directory for a ``<name>.log`` file; no file output when omitted
        console: Whether to also log to stderr (defaults to True)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(f"chatpulse.{name}")
    logger.setLevel(level)

    # Avoid adding duplicate handlers if already configured
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=config.LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / f"{name}.log", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a chatpulse component.

    For handlers and formatting, call setup_logging() once at startup.
    """
    return logging.getLogger(f"chatpulse.{name}")
