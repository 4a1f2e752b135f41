"""
Open311 Sync - Logging Setup

Configures the root logger from the ``logging`` section of the settings.
JSON output goes through python-json-logger so the ``extra`` context attached
to pipeline log calls ends up as structured keys.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

from src.shared.config import Settings, get_config

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Marks the handler we install so repeated calls replace it instead of stacking
_HANDLER_NAME = "open311-sync"


def configure_logging(config: Settings | None = None) -> logging.Logger:
    """
    Install a single stream handler on the root logger.

    Safe to call on every invocation: a warm Lambda container reuses the
    interpreter, so a previously installed handler is replaced.

    Args:
        config: Settings object (uses default if not provided)

    Returns:
        The root logger
    """
    config = config or get_config()
    log_config = config.logging

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    if log_config.format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_config.level.upper())

    return root
