"""Settings loaded from TSK_* environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TSK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def parse_log_level(raw: str, default: int = logging.WARNING) -> int:
    """Accept level names ("info") or numbers ("20")."""
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: Path
    db_path: Path
    log_dir: Path
    log_level: int

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("DATA_DIR"), Path("~/.tsk").expanduser())
        return Settings(
            data_dir=data_dir,
            db_path=_env_path(_k("DB_PATH"), data_dir / "tsk.sqlite3"),
            log_dir=_env_path(_k("LOG_DIR"), data_dir / "logs"),
            log_level=parse_log_level(_env(_k("LOG_LEVEL"), "WARNING")),
        )
