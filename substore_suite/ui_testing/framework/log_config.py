"""
================================================================================
Logging Setup
================================================================================

One Loguru configuration for page objects, fixtures and the runner.

Sinks come from the `logging` section of config.yaml: a colored stderr sink
always, plus a rotating file sink when `logging.file` is set.

Author: Automation Team
License: MIT
================================================================================
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config_loader import get_config


DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"

_configured: bool = False


def _add_file_sink(path: str, level: str, fmt: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        path,
        level=level,
        # column padding only helps on a terminal
        format=fmt.replace("{level: <8}", "{level}"),
        rotation=get_config("logging.rotation", "10 MB"),
        retention=get_config("logging.retention", "7 days"),
        compression="zip",
    )


def init_logger(level: Optional[str] = None, format_str: Optional[str] = None) -> None:
    """
    Replace Loguru's default handler with the suite's sinks.

    Only the first call has an effect, so fixtures and scripts can call it
    freely.

    Args:
        level: Minimum level; ``logging.level`` when omitted
        format_str: Record format; ``logging.format`` when omitted
    """
    global _configured
    if _configured:
        return

    level = (level or get_config("logging.level", "INFO")).upper()
    fmt = format_str or get_config("logging.format", DEFAULT_FORMAT)

    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt, colorize=True, backtrace=True, diagnose=True)

    log_file = get_config("logging.file", "")
    if log_file:
        _add_file_sink(log_file, level, fmt)

    _configured = True
    logger.debug(f"Logging at {level}{f', file {log_file}' if log_file else ''}")


__all__ = [
    "init_logger",
]
