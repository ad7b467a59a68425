"""
Logging setup for the customer_resolution CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are attached here, once, by the command-line entry point.
"""

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "customer_resolution"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: If True, console shows DEBUG; otherwise INFO and above
        log_file: Optional file that receives DEBUG and above

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.handlers = []  # Clear any existing handlers

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(file_handler)

    # Prevent propagation to root logger (avoid duplicate messages)
    logger.propagate = False
    return logger
