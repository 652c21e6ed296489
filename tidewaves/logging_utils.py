"""Logging utilities for the TimeWaves service.

This module provides logging configuration for the application, including a
filter that reports source paths relative to the project root.
"""

import logging
import os

import google.cloud.logging  # type: ignore[import]

# Determine project root for relative log paths (directory containing this package)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

LOCAL_LOG_FORMAT = "%(levelname)s:%(relativepath)s:%(lineno)d: %(message)s"


class RelativePathFilter(logging.Filter):
    """Logging filter to add relative path attribute to LogRecords."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            record.relativepath = os.path.relpath(
                os.path.normpath(record.pathname), PROJECT_ROOT
            )
        except ValueError:
            # Different drive on Windows
            record.relativepath = record.pathname
        return True


def _configure_local_handler(root_logger: logging.Logger) -> None:
    """Replace any handlers on root_logger with a stream handler using relative paths."""
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.addFilter(RelativePathFilter())
    handler.setFormatter(logging.Formatter(LOCAL_LOG_FORMAT))
    root_logger.addHandler(handler)


def setup_logging(level: int = logging.INFO) -> None:
    """Configures logging based on the environment (Cloud Run or local)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # If running in Google Cloud Run, use cloud logging
    if "K_SERVICE" in os.environ:
        log_client = google.cloud.logging.Client()  # type: ignore[no-untyped-call]
        log_client.setup_logging(log_level=level)  # type: ignore[no-untyped-call]
        logging.info("Using google cloud logging")
    else:
        _configure_local_handler(root_logger)
        logging.info("Using standard stream handler with relative path format")
