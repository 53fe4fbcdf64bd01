"""Logging configuration for the arazzo-mermaid command line tool."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from arazzo_mermaid import settings

ROOT_LOGGER_NAME = "arazzo_mermaid"

# Prevent duplicate handlers
_configured_loggers: set[str] = set()


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str | None = None,
    filename: str | None = None,
) -> logging.Logger:
    """Setup a logger with a stderr handler and an optional file handler.

    Module loggers (``logging.getLogger(__name__)``) propagate into the
    package logger, so configuring it once covers the whole tool. Stdout is
    left alone because it carries the rendered diagram.

    Args:
        name: Logger name
        level: Level name (e.g. 'DEBUG'); defaults to ARAZZO_MERMAID_LOG_LEVEL
        filename: Log file path; defaults to ARAZZO_MERMAID_LOG_FILE

    Returns:
        Configured logger instance
    """
    if name in _configured_loggers:
        return logging.getLogger(name)

    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.propagate = False  # Prevent duplicate logs

    # Console handler
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(log_level)
    sh.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(sh)

    # File handler
    log_file = filename if filename is not None else settings.LOG_FILE
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(log_level)
        fh.setFormatter(logging.Formatter(
            "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
        ))
        logger.addHandler(fh)

    _configured_loggers.add(name)
    return logger
