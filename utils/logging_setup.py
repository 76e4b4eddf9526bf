# utils/logging_setup.py
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_NAME = "strivio"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _state_dir(app: str = APP_NAME) -> Path:
    base = os.environ.get("XDG_STATE_HOME", os.path.expanduser("~/.local/state"))
    d = Path(base) / app / "logs"
    d.mkdir(parents=True, exist_ok=True)
    return d


def setup_logging(level_name: Optional[str] = None, log_to_file: bool = True) -> Optional[Path]:
    """Configure root logging once per process and return the log file path.

    Level comes from ``level_name`` or STRIVIO_LOG_LEVEL (default INFO).
    """
    global _configured
    level_name = (level_name or os.environ.get("STRIVIO_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return None

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    logfile = None
    if log_to_file:
        logfile = _state_dir() / f"{APP_NAME}.log"
        # rotate at 5MB, keep 7 backups
        fh = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=7, encoding="utf-8")
        fh.setFormatter(formatter)
        fh.setLevel(level)
        root.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(formatter)
    ch.setLevel(level)
    root.addHandler(ch)

    _configured = True
    logging.getLogger(__name__).info("Logging initialized at %s; file: %s", level_name, logfile)
    return logfile
