from __future__ import annotations

"""SQLite-backed key/value persistence for settings and stats.

The schema is managed by a small migration system. Each schema change is a
function in the MIGRATIONS list and applied versions are tracked in the
``schema_migrations`` table, so ``init_db`` can be called repeatedly.

Values are stored as JSON text. ``KeyValueStore`` is best-effort: a broken
or unavailable database never raises into callers, it only logs and falls
back to the supplied default.
"""

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import sqlite3
from typing import Any, Callable, Iterable

_log = logging.getLogger(__name__)

STORAGE_KEYS = {
    "settings": "pomodoro.settings.v1",
    "stats": "pomodoro.stats.v1",
}

_STORE_ERRORS = (sqlite3.Error, OSError, TypeError, ValueError)


@dataclass(slots=True)
class DBConfig:
    path: Path
    pragmas: tuple[tuple[str, str | int], ...] = (
        ("journal_mode", "WAL"),
        ("synchronous", "NORMAL"),
    )


class DatabaseManager:
    def __init__(self, config: DBConfig):
        self.config = config
        self._conn: sqlite3.Connection | None = None

    # --- Low level helpers -------------------------------------------------
    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.config.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.config.path)
            self._conn.row_factory = sqlite3.Row
            self._apply_pragmas(self._conn)
        return self._conn

    def _apply_pragmas(self, conn: sqlite3.Connection) -> None:
        cur = conn.cursor()
        for key, value in self.config.pragmas:
            cur.execute(f"PRAGMA {key}={value}")
        cur.close()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # --- Migration system --------------------------------------------------
    def init_db(self) -> None:
        conn = self.connect()
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
                )
                """
            )

        applied_versions = self._get_applied_versions()
        for version, migration_fn in enumerate(MIGRATIONS, start=1):
            if version in applied_versions:
                continue
            with conn:
                migration_fn(conn)
                conn.execute(
                    "INSERT INTO schema_migrations (version) VALUES (?)", (version,)
                )

    def _get_applied_versions(self) -> set[int]:
        conn = self.connect()
        cur = conn.execute("SELECT version FROM schema_migrations")
        return {row[0] for row in cur.fetchall()}

    # --- Convenience -------------------------------------------------------
    def execute(self, sql: str, params: Iterable | None = None) -> sqlite3.Cursor:
        conn = self.connect()
        cur = conn.cursor()
        cur.execute(sql, params or [])
        return cur

    def query_one(self, sql: str, params: Iterable | None = None) -> sqlite3.Row | None:
        cur = self.execute(sql, params)
        return cur.fetchone()


# --- Migration definitions --------------------------------------------------

def migration_001_create_kv_store(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
        );
        """
    )


MIGRATIONS: list[Callable[[sqlite3.Connection], None]] = [
    migration_001_create_kv_store,
]


class KeyValueStore:
    """JSON values keyed by string; reads fall back, writes never raise."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    @classmethod
    def open(cls, path: Path) -> "KeyValueStore":
        db = DatabaseManager(DBConfig(path=path))
        try:
            db.init_db()
        except _STORE_ERRORS as e:
            _log.warning("storage unavailable, running in memory: %s", e)
        return cls(db)

    def load(self, key: str, default: Any = None) -> Any:
        try:
            row = self._db.query_one("SELECT value FROM kv_store WHERE key=?", (key,))
            if row is None:
                return default
            return json.loads(row["value"])
        except _STORE_ERRORS as e:
            _log.warning("load failed for %s: %s", key, e, extra={"_json_key": key})
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
            conn = self._db.connect()
            with conn:
                conn.execute(
                    "INSERT INTO kv_store(key, value) VALUES(?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
                    "updated_at=strftime('%Y-%m-%dT%H:%M:%fZ','now')",
                    (key, payload),
                )
        except _STORE_ERRORS as e:
            _log.warning("save failed for %s: %s", key, e, extra={"_json_key": key})

    def close(self) -> None:
        try:
            self._db.close()
        except sqlite3.Error as e:  # pragma: no cover
            _log.warning("close failed: %s", e)


__all__ = [
    "DBConfig",
    "DatabaseManager",
    "KeyValueStore",
    "STORAGE_KEYS",
]
