"""
Logging setup for escapeview.

Exports:
    - logger: Global Loguru logger (ready for use/import).
    - configure_logging: Replace the default stderr sink with one at a given level.
    - setup_logfile: Add file logging with rotation/compression.
"""

import sys

from loguru import logger

__all__ = [
    "logger",
    "configure_logging",
    "setup_logfile",
]

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def configure_logging(level="INFO", log_path=None):
    """
    Route log output to stderr at `level`, and optionally to a file.

    Args:
        level (str): Logging level (DEBUG, INFO, etc.).
        log_path (str): Optional path of a rotating log file.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT)
    if log_path:
        setup_logfile(log_path, level=level)


def setup_logfile(
    log_path,
    rotation="10 MB",
    retention="10 days",
    compression="zip",
    level="INFO",
):
    """
    Add a rotating file handler to the global logger.

    Args:
        log_path (str): Path to the log file.
        rotation (str): Size or time string for log rotation.
        retention (str): How long to keep old logs.
        compression (str): Compression method for rotated logs.
        level (str): Logging level (DEBUG, INFO, etc.).
    """
    logger.add(
        log_path,
        rotation=rotation,
        retention=retention,
        compression=compression,
        level=level.upper(),
        enqueue=True,
        backtrace=True,
    )
    logger.info(f"File logging initialized: {log_path}")
