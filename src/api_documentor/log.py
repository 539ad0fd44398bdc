"""Logging setup for api-documentor.

Components log through ``logging.getLogger(__name__)`` unless a logger is
passed in explicitly. The minimum level is a single setting on the package
logger.
"""

import logging
import sys
from enum import IntEnum

PACKAGE_LOGGER = "api_documentor"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LogLevel(IntEnum):
    """The four severities the tool reports at."""

    ERROR = logging.ERROR
    WARN = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG


def configure_logging(level: LogLevel = LogLevel.INFO, stream=None) -> logging.Logger:
    """Install a stream handler on the package logger and set its level.

    Calling this again replaces the handler instead of stacking another one.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_api_documentor", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._api_documentor = True
    logger.addHandler(handler)
    logger.setLevel(int(level))
    return logger


def set_level(level: LogLevel) -> None:
    logging.getLogger(PACKAGE_LOGGER).setLevel(int(level))
