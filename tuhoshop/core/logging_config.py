"""Process-wide logging setup."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("tuhoshop")


def setup_logging(level: str | int = "INFO") -> None:
    """Configure the root logger once; safe to call repeatedly."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)

    # aiogram logs every outgoing request at INFO
    logging.getLogger("aiogram.event").setLevel(logging.WARNING)
