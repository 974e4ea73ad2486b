"""
Logging setup shared by the CLI and the HTTP server.

Analyzer modules log through `logging.getLogger(__name__)`; this module only
attaches handlers to the root logger and keeps chatty client libraries at
WARNING unless debug output was requested.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "uvicorn.access")


def resolve_level(level: Union[int, str, None]) -> int:
    """Accept a logging constant or a level name; falls back to PMS_LOG_LEVEL, then INFO."""
    if level is None:
        level = os.environ.get("PMS_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Route analyzer logs to stderr and, optionally, a log file.

    Args:
        level: Logging level or level name (default: PMS_LOG_LEVEL or INFO)
        log_file: Optional path of an additional log file

    Returns:
        The configured root logger
    """
    level = resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    library_level = level if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return root
