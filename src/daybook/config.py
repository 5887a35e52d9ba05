# src/daybook/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Bad values never crash startup: they fall back to defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAYBOOK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv() -> None:
    """Load .env from the working directory, never overriding the real environment."""
    load_dotenv(override=False)


_load_dotenv()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    state_db_path: Path

    # ---- Clock ----
    tick_interval_seconds: float

    # ---- Navigation ----
    scroll_threshold: float
    navigate_settle_seconds: float
    scroll_settle_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "daybook").strip() or "daybook"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/daybook"))
        state_db_path = _env_path(_k("STATE_DB_PATH"), data_dir / "daybook.sqlite3")

        # Day granularity: once a minute is plenty.
        tick_interval_seconds = max(1.0, _env_float(_k("TICK_INTERVAL_SECONDS"), 60.0))

        scroll_threshold = max(0.0, _env_float(_k("SCROLL_THRESHOLD"), 50.0))
        navigate_settle_seconds = max(0.0, _env_float(_k("NAVIGATE_SETTLE_SECONDS"), 0.6))
        scroll_settle_seconds = max(0.0, _env_float(_k("SCROLL_SETTLE_SECONDS"), 0.4))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            state_db_path=state_db_path,
            tick_interval_seconds=tick_interval_seconds,
            scroll_threshold=scroll_threshold,
            navigate_settle_seconds=navigate_settle_seconds,
            scroll_settle_seconds=scroll_settle_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
