"""
Logging configuration for the structured-markup extractors.

Everything logs under the "structured_markup" package logger.  Console
output goes to stderr so run_extractor.py can print JSON on stdout and
still be piped into other tools.
"""

import logging
import os
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "structured_markup"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_number(level: Union[int, str]) -> int:
    """Accept 20 or "info"; unknown names fall back to WARNING."""
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.strip().upper())
    return number if isinstance(number, int) else logging.WARNING


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger and return it.

    Safe to call repeatedly: the stderr handler is installed once, each call
    re-levels every handler, and a log file is attached the first time its
    path is seen.

    Args:
        name: Logger name
        level: Logging level as int or level name (default: WARNING)
        log_file: Optional file that receives the same records

    Returns:
        Configured logger instance
    """
    level = _level_number(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(getattr(h, "_structured_markup_console", False) for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler._structured_markup_console = True
        logger.addHandler(console_handler)

    if log_file:
        attached = {getattr(h, "baseFilename", None) for h in logger.handlers}
        if os.path.abspath(log_file) not in attached:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger


# Package logger, configured at WARNING on import
logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Child loggers (e.g. "structured_markup.rdfa") propagate to the package
    logger, and their name shows which extractor produced each message.

    Args:
        module_name: Name of the module (e.g., 'microformats', 'rdfa')

    Returns:
        Child logger instance
    """
    return logging.getLogger(f"{PACKAGE_LOGGER}.{module_name}")
