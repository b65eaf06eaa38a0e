"""SQLite-backed storage medium.

Persists raw strings in a single table of an embedded database file so that
cached content survives between runs.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from .errors import StorageError

logger = logging.getLogger(__name__)


class SqliteStorage:
    """Durable KeyValueStorage on an SQLite file.

    Opens a short-lived connection per operation, so one instance can be
    shared freely within a process. Every sqlite3/OS failure surfaces as
    StorageError.
    """

    TABLE = "kv_store"

    def __init__(self, db_path: Path | str):
        """Initialize storage and create the table if needed.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_db(self) -> None:
        """Create parent directory and key-value table."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
            try:
                conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.TABLE} (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot initialize {self.db_path}: {e}") from e

    def _execute(self, sql: str, params: tuple = (), key: Optional[str] = None) -> list[tuple]:
        try:
            conn = self._connect()
            try:
                rows = conn.execute(sql, params).fetchall()
                conn.commit()
                return rows
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"SQLite operation failed on {self.db_path}: {e}", key=key) from e

    def get(self, key: str) -> Optional[str]:
        rows = self._execute(f"SELECT value FROM {self.TABLE} WHERE key = ?", (key,), key=key)
        return rows[0][0] if rows else None

    def set(self, key: str, value: str) -> None:
        self._execute(
            f"INSERT OR REPLACE INTO {self.TABLE} (key, value) VALUES (?, ?)",
            (key, value),
            key=key,
        )

    def remove(self, key: str) -> None:
        self._execute(f"DELETE FROM {self.TABLE} WHERE key = ?", (key,), key=key)

    def clear(self) -> None:
        self._execute(f"DELETE FROM {self.TABLE}")

    def keys(self) -> list[str]:
        return [row[0] for row in self._execute(f"SELECT key FROM {self.TABLE} ORDER BY key")]
