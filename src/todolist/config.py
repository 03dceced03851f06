# src/todolist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Bad values fall back to defaults instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


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


_STORAGE_SUFFIX = {"sqlite": "todolist.sqlite3", "json": "todolist.json", "memory": ""}


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data ----
    data_dir: Path
    storage_backend: str
    storage_path: Path
    storage_key: str

    # ---- Behaviour ----
    undo_window_seconds: float
    default_filter: str
    default_sort: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todolist") or "todolist"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todolist"))

        storage_backend = _env(_k("STORAGE_BACKEND"), "sqlite").strip().lower()
        if storage_backend not in _STORAGE_SUFFIX:
            storage_backend = "sqlite"
        storage_path = _env_path(
            _k("STORAGE_PATH"), data_dir / (_STORAGE_SUFFIX[storage_backend] or "unused")
        )
        storage_key = _env(_k("STORAGE_KEY"), "react_todo_complete_v1").strip() or "react_todo_complete_v1"

        undo_window_seconds = max(0.0, _env_float(_k("UNDO_WINDOW_SECONDS"), 5.0))
        default_filter = _env(_k("DEFAULT_FILTER"), "all").strip().lower() or "all"
        default_sort = _env(_k("DEFAULT_SORT"), "created_desc").strip().lower() or "created_desc"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_path=storage_path,
            storage_key=storage_key,
            undo_window_seconds=undo_window_seconds,
            default_filter=default_filter,
            default_sort=default_sort,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
