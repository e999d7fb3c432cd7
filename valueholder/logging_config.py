"""Shared logging configuration helpers."""

from __future__ import annotations

import logging
import sys
from logging import Handler
from typing import List

from valueholder.config import Configuration

PACKAGE_LOGGER = "valueholder"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(configuration: Configuration) -> None:
    """Configure the package logger outputs from configuration.

    Replaces handlers installed by a previous call. Records still propagate
    to the root logger, so application-wide logging setup keeps working.
    """
    log_level = getattr(logging, configuration.log_level, logging.WARNING)
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: List[Handler] = []
    if configuration.log_file is not None:
        log_file = configuration.log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler: Handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    if configuration.debug_mode:
        stderr_handler: Handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(log_level)
        stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(stderr_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    logging.getLogger(__name__).info(
        "Logging initialized level=%s file=%s", configuration.log_level, configuration.log_file
    )
