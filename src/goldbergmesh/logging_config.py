"""
Logging Configuration
Sets up the package logger for applications embedding the generator.
The library itself never configures logging on import.
"""
import logging
import sys
from typing import Optional

from goldbergmesh import config


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'goldbergmesh' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG to see per-stage timings and counts)
        log_file: Optional path to also write the generation log to.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("goldbergmesh")
    logger.setLevel(level)

    # Calling setup twice must not print every record twice
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging initialized.")
    return logger
