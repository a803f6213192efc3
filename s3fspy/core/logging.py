"""Logging utilities for s3fspy modules."""

import logging

PACKAGE_LOGGERS = (
    's3fspy',
    's3fspy.client',
    's3fspy.api',
    's3fspy.listing',
    's3fspy.navigation',
    's3fspy.errors',
    's3fspy.cli',
)


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    The logger propagates to the root logger and only gets a default
    WARNING level when the root logger has no handlers (basicConfig has
    not been called yet).

    Args:
        name: Logger name (typically 's3fspy.<module>')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)

    return logger


def set_level(level: int) -> None:
    """Set the level of every s3fspy logger."""
    for logger_name in PACKAGE_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True
