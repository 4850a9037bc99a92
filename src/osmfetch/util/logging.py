from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}")
    return logging.getLevelName(name)


def setup_logging(log_dir: Path, level: int | str = logging.INFO) -> Path:
    """Send records to ``<log_dir>/osmfetch.log`` and the console.

    Replaces any handlers already on the root logger.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "osmfetch.log"

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=5)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    root.handlers.clear()
    root.addHandler(file_handler)
    root.addHandler(console_handler)
    return log_path
