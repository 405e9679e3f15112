"""Logging configuration for the tsk CLI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure logging with:
    - Console handler on stderr, quiet by default so the TUI frame stays clean
    - File handler with full logs for debugging

    Returns the log file path. Call once, before the first log record.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tsk.log"

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
