"""
Logging configuration for qsample.

The library only creates loggers; handlers are attached by applications
(or the benchmark CLI) through setup_logging.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "qsample"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging for the qsample logger hierarchy.

    Args:
        level: Logging level (default: INFO).
        log_file: Optional file to write logs to.
        format_string: Optional custom format string.

    Returns:
        Configured root qsample logger.
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    formatter = logging.Formatter(format_string)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a qsample module, e.g. get_logger("state_space")."""
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
