"""Centralized logging configuration for Sideout."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import PATHS, LOGGING_SETTINGS

LOGGER_NAME = "sideout"


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = LOGGING_SETTINGS.level,
    log_to_file: bool = LOGGING_SETTINGS.log_to_file,
    log_to_console: bool = LOGGING_SETTINGS.log_to_console,
) -> logging.Logger:
    """
    Configure logging for the application.

    The engine, models and services packages log under their module names,
    so their records are routed through handlers attached here as well as
    to the ``sideout`` logger itself.

    Args:
        log_dir: Directory for log files (default: the platform log dir)
        level: Logging level (default: from LOGGING_SETTINGS)
        log_to_file: Whether to log to file
        log_to_console: Whether to log to console

    Returns:
        Configured ``sideout`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers = []

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

    handlers: list[logging.Handler] = []

    if log_to_file:
        if log_dir is None:
            log_dir = PATHS.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'sideout_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        handlers.append(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        handlers.append(console_handler)

    for handler in handlers:
        logger.addHandler(handler)

    for package in ("engine", "models", "services", "app"):
        package_logger = logging.getLogger(package)
        package_logger.setLevel(level)
        package_logger.handlers = list(handlers)

    return logger
