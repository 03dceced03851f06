# src/todolist/storage/kv.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


class SqliteKeyValueStorage:
    """
    SQLite key-value slot storage.

    One table `kv(key TEXT PRIMARY KEY, value TEXT NOT NULL)`; writes are upserts.

    Thread-safety:
    - each method opens its own SQLite connection

    The schema is created on first access, so a corrupt database file surfaces
    as an error from get_item/set_item rather than from the constructor.
    """

    def __init__(self, db_path: str | Path = "todolist.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._schema_ready = False
        logger.info("SqliteKeyValueStorage ready db=%s", self._db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _connect(self) -> sqlite3.Connection:
        conn = self._get_conn()
        if not self._schema_ready:
            try:
                self._ensure_schema(conn)
            except Exception:
                conn.close()
                raise
            self._schema_ready = True
        return conn

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def get_item(self, key: str) -> str | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()


class JsonFileKeyValueStorage:
    """
    Key-value slots kept in one JSON object file.

    Writes go to a temp file and are swapped in with os.replace, so a crash
    mid-write leaves the previous file intact. An unreadable file reads as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Unreadable key-value file %s; treating as empty", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Key-value file %s does not hold a JSON object; treating as empty", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)


class MemoryKeyValueStorage:
    """Process-local storage (nothing survives a restart)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


STORAGE_BACKENDS = ("sqlite", "json", "memory")


KeyValueBackend = SqliteKeyValueStorage | JsonFileKeyValueStorage | MemoryKeyValueStorage


def open_storage(backend: str, path: str | Path) -> KeyValueBackend:
    """Build the storage backend named in settings."""
    name = (backend or "").strip().lower()
    if name == "sqlite":
        return SqliteKeyValueStorage(path)
    if name == "json":
        return JsonFileKeyValueStorage(path)
    if name == "memory":
        return MemoryKeyValueStorage()
    raise ValueError(f"unknown storage backend {backend!r} (expected one of: {', '.join(STORAGE_BACKENDS)})")
