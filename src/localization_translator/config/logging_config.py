"""
Logging configuration for the localization translator.

This module provides centralized logging setup used across all package
components. It configures consistent log formatting, log levels, and
handlers for the entire application.

Usage:
    from localization_translator.config.logging_config import setup_logging, get_logger

    # At application startup
    setup_logging()

    # In each module
    logger = get_logger(__name__)
    logger.info("Translating lang/en/messages.json")

License: MIT
"""

import logging
import sys
from typing import Optional


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================

# Includes: timestamp, logger name, log level, and the actual message.
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_LEVEL = logging.INFO


# =============================================================================
# FUNCTION DEFINITIONS
# =============================================================================

def setup_logging(
    level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    suppress_third_party: bool = True
) -> None:
    """
    Configure logging for the entire application.

    This function sets up the root logger with consistent formatting and
    optionally suppresses verbose logging from the HTTP and database
    libraries used by the translator.

    It should be called once at application startup, typically from a
    script's main(). Library code only ever calls get_logger().

    Args:
        level: The logging level threshold. Defaults to INFO.
        log_format: The format string for log messages.
        date_format: The strftime format string for timestamps.
        suppress_third_party: If True, sets third-party library loggers to
            WARNING level to reduce noise.

    Example:
        >>> setup_logging(level=logging.DEBUG)
        >>> logger = get_logger(__name__)
        >>> logger.debug("Debug message will now be shown")
    """
    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    if suppress_third_party:
        _suppress_third_party_logging()


def _suppress_third_party_logging() -> None:
    """
    Suppress verbose logging from third-party libraries.

    Sets the HTTP client and PostgreSQL driver loggers to WARNING level,
    hiding connection pool chatter while keeping warnings and errors.
    """
    loggers_to_suppress = [
        # HTTP libraries log every connection and retry
        "urllib3",
        "urllib3.connectionpool",
        "requests",

        # PostgreSQL driver
        "psycopg2",
    ]

    for logger_name in loggers_to_suppress:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: The name of the logger, typically the module's __name__.
            If None, returns the root logger.

    Returns:
        logging.Logger: A logger that inherits the root configuration.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Cache hits: %d", 12)
    """
    return logging.getLogger(name)


def set_log_level(level: int, logger_name: Optional[str] = None) -> None:
    """
    Dynamically change the log level for a specific logger or the root logger.

    Args:
        level: The new logging level to set.
        logger_name: The name of the logger to modify. If None, modifies
            the root logger which affects all loggers.

    Example:
        >>> # Show per-batch cache statistics only
        >>> set_log_level(logging.DEBUG, "localization_translator.translation")
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
