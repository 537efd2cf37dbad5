"""Logging setup shared by the CLI entry point."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(
    level: str = "WARNING",
    log_file: str | None = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """Configure the root logger once; later calls only adjust the level."""
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if any(getattr(h, "_habitcli", False) for h in logger.handlers):
        return logger

    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handler: logging.Handler = RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._habitcli = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
