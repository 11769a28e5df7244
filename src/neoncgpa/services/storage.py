from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from neoncgpa.config.settings import settings
from neoncgpa.services.snapshot import SnapshotError, dump_session, load_session
from neoncgpa.state.session_state import Session, default_session

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class LoadStatus(Enum):
    LOADED = "loaded"
    DEFAULT_MISSING = "default_missing"
    DEFAULT_ERROR = "default_error"


@dataclass(frozen=True)
class LoadResult:
    session: Session
    status: LoadStatus
    error: str | None = None

    @property
    def is_default(self) -> bool:
        return self.status is not LoadStatus.LOADED


class SnapshotStore:
    """Single-key blob store on SQLite; every save overwrites the whole session."""

    def __init__(self, db_path: str, key: str, legacy_keys: tuple[str, ...] = ()) -> None:
        self.db_path = db_path
        self.key = key
        self.legacy_keys = legacy_keys
        self._conn: sqlite3.Connection | None = None

    @classmethod
    def from_settings(cls) -> "SnapshotStore":
        return cls(settings.db_path, settings.storage_key, settings.legacy_storage_keys)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                if self.db_path != ":memory:":
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path, check_same_thread=False)
                conn.execute("CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
                conn.commit()
            except (OSError, sqlite3.Error) as exc:
                raise StorageError(f"Cannot open snapshot store at {self.db_path}: {exc}") from exc
            self._conn = conn
        return self._conn

    def read_raw(self) -> str | None:
        try:
            cur = self._connection().execute("SELECT value FROM kv WHERE key=?", (self.key,))
            row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        return row[0] if row else None

    def write_raw(self, value: str) -> None:
        conn = self._connection()
        try:
            conn.execute(
                """INSERT INTO kv(key, value) VALUES(?, ?)
                   ON CONFLICT(key) DO UPDATE SET value=excluded.value""",
                (self.key, value),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def load(self) -> LoadResult:
        try:
            raw = self.read_raw()
            session = load_session(raw) if raw else None
        except (StorageError, SnapshotError) as exc:
            logger.warning("Snapshot unreadable, starting from defaults: %s", exc)
            return LoadResult(default_session(), LoadStatus.DEFAULT_ERROR, str(exc))

        if session is None or not session.semesters:
            logger.info("No stored snapshot under %r, starting from defaults", self.key)
            return LoadResult(default_session(), LoadStatus.DEFAULT_MISSING)

        logger.info("Loaded %d semester(s) from %s", len(session.semesters), self.db_path)
        return LoadResult(session, LoadStatus.LOADED)

    def save(self, session: Session) -> bool:
        try:
            self.write_raw(dump_session(session))
        except StorageError as exc:
            logger.error("Failed to save snapshot: %s", exc)
            return False
        return True

    def clear(self) -> bool:
        keys = (self.key, *self.legacy_keys)
        try:
            conn = self._connection()
            conn.executemany("DELETE FROM kv WHERE key=?", [(k,) for k in keys])
            conn.commit()
        except (StorageError, sqlite3.Error) as exc:
            logger.error("Failed to clear snapshot: %s", exc)
            return False
        return True

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
