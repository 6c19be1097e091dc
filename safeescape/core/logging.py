"""
@file logging.py
@brief Centralized logging configuration
@details
Configures application logging with stdout and/or file output.

Environment:
- LOG_OUTPUT: 'stdout', 'file' or 'both' (default)
- LOG_DIR: directory for app.log (default: <repo>/logs)
- LOG_LEVEL: root level name (default: INFO)

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

import logging
import os
import sys
from typing import List, Optional

## @brief Chatty client libraries kept at WARNING
_QUIET_LOGGERS = ("urllib3", "google", "grpc")


def _resolve_log_dir() -> Optional[str]:
    log_dir = os.getenv("LOG_DIR")
    if log_dir is None:
        # this file is in safeescape/core/, repository root is 3 levels up
        base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
        log_dir = os.path.join(base_dir, "logs")
    try:
        os.makedirs(log_dir, exist_ok=True)
    except (OSError, PermissionError):
        return None
    if not os.access(log_dir, os.W_OK):
        return None
    return log_dir


def setup_logging() -> logging.Logger:
    """
    @brief Configure and return the application logger
    @details
    Falls back to stdout when the log directory or file cannot be opened.
    """
    log_output = os.getenv("LOG_OUTPUT", "both").lower()
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    handlers: List[logging.Handler] = []
    if log_output in ("stdout", "both"):
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_output in ("file", "both"):
        log_dir = _resolve_log_dir()
        if log_dir:
            try:
                handlers.append(logging.FileHandler(os.path.join(log_dir, "app.log")))
            except (OSError, PermissionError):
                pass

    # Safety net
    if not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("safeescape")
