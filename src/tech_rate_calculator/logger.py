"""Logging infrastructure for the Technician Rate Calculator."""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LoggingConfig


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    log_format: Optional[str] = None,
    console_output: bool = True,
) -> None:
    """Set up logging configuration.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional path to log file
        log_format: Optional custom log format string
        console_output: Whether to output logs to console
    """
    if log_format is None:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if console_output:
        # stderr keeps report output on stdout clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}")
    if log_file:
        logger.debug(f"Logging to file: {log_file}")


def setup_logging_from_config(config: LoggingConfig, verbose: bool = False) -> None:
    """Apply a LoggingConfig section; ``verbose`` forces DEBUG."""
    level = logging.DEBUG if verbose else getattr(logging, config.level)
    setup_logging(
        level=level,
        log_file=Path(config.file) if config.file else None,
        log_format=config.format,
        console_output=config.console_output,
    )

