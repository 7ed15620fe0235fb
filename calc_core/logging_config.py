"""
Logging configuration for calc_core and the tools built on it.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """
    Configures the 'calc_core' logger namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.WARNING)
        log_file: Optional path to also write log records to.
    """
    logger = logging.getLogger("calc_core")
    logger.setLevel(level)

    # Avoid duplicate handlers when Streamlit reruns the script.
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
