"""
Logging configuration for the mock interview backend.
"""
import logging
import os
import sys
from typing import Optional

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def setup_logger(
    name: str,
    log_level: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a named logger writing to stdout.

    Args:
        name: Logger name (usually the module's short name)
        log_level: Logging level name. If None, uses the LOG_LEVEL environment variable.
        format_string: Custom format string. If None, uses default.

    Returns:
        Configured logger instance
    """
    level = getattr(logging, (log_level or LOG_LEVEL).upper(), logging.INFO)

    logger = logging.getLogger(f"mock_interview.{name}")
    logger.setLevel(level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    if format_string is None:
        format_string = (
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(filename)s:%(lineno)d] - %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    return logger
