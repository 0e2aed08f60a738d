from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Dict, Protocol

logger = logging.getLogger(__name__)


class ScorePersistence(Protocol):
    """Where a session keeps its best score between runs."""

    def load_best_score(self, key: str) -> int:
        ...

    def save(self, best_score: int, key: str) -> None:
        """Records `best_score` unless the stored value for `key` is higher."""
        ...


class MemoryScorePersistence:
    def __init__(self) -> None:
        self._storage: Dict[str, int] = {}

    def load_best_score(self, key: str) -> int:
        return self._storage.get(key, 0)

    def save(self, best_score: int, key: str) -> None:
        self._storage[key] = max(best_score, self._storage.get(key, 0))


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        logger.warning("DB directory for %s is not writable, looking for a fallback", db_path)
    candidates = [
        os.getenv('TILEMERGE_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(db_path) or 'tilemerge.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            return os.path.join(d, base)
        except OSError:
            continue
    # Last resort: current working directory
    return base


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the best score table exists."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS best_scores (
            key TEXT PRIMARY KEY,
            best_score INTEGER NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


class SqliteScorePersistence:
    """Best scores in a SQLite file, one row per key.

    Storage errors are logged and otherwise ignored: a failed load reads as 0
    and a failed save is dropped.
    """

    def __init__(self, db_path: str):
        self.db_path = _resolve_db_path(db_path)

    def _connect(self) -> sqlite3.Connection:
        _ensure_db_dir(self.db_path)
        conn = sqlite3.connect(self.db_path)
        try:
            _ensure_db(conn)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def load_best_score(self, key: str) -> int:
        try:
            conn = self._connect()
        except sqlite3.Error:
            logger.warning("Could not open best score DB %s", self.db_path, exc_info=True)
            return 0
        try:
            row = conn.execute("SELECT best_score FROM best_scores WHERE key = ?", (key,)).fetchone()
            return int(row[0]) if row else 0
        except sqlite3.Error:
            logger.warning("Could not read best score for %r", key, exc_info=True)
            return 0
        finally:
            conn.close()

    def save(self, best_score: int, key: str) -> None:
        try:
            conn = self._connect()
        except sqlite3.Error:
            logger.warning("Could not open best score DB %s", self.db_path, exc_info=True)
            return
        try:
            conn.execute(
                """
                INSERT INTO best_scores (key, best_score, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    best_score = MAX(best_score, excluded.best_score),
                    updated_at = excluded.updated_at
                """,
                (key, int(best_score), datetime.now(timezone.utc).isoformat(timespec='seconds')),
            )
            conn.commit()
        except sqlite3.Error:
            logger.warning("Could not save best score %d for %r", best_score, key, exc_info=True)
        finally:
            conn.close()
