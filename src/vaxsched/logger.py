"""
Process-wide logging rendered through rich.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.logging import RichHandler

_LOGGER_INITIALIZED = False
DEFAULT_LEVEL = "WARNING"


def configure_logging(level: Optional[str] = None, force: bool = False) -> None:
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED and not force:
        return
    logging.basicConfig(
        level=(level or DEFAULT_LEVEL).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=force,
    )
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
