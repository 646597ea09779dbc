"""
Key-Value State Store for Neon Drift.

Provides portable persistence for:
- The per-word mastery mapping (one JSON snapshot)
- The daily goal counter

The engine only relies on get/set of strings, so any provider
implementing KeyValueStore can be plugged in.

Database location: ~/.neon-drift/state.db
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Protocol

from loguru import logger


class KeyValueStore(Protocol):
    """Minimal persistence contract used by the mastery and goal stores."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under key."""
        ...


# =============================================================================
# In-Memory Store
# =============================================================================


class MemoryKeyValueStore:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


# =============================================================================
# SQLite Store
# =============================================================================


class SQLiteKeyValueStore:
    """
    SQLite-backed key-value persistence.

    Values are full snapshots; every set() overwrites the previous row.
    """

    DEFAULT_DB_PATH = Path.home() / ".neon-drift" / "state.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the state store.

        Args:
            db_path: Custom database path (defaults to ~/.neon-drift/state.db)
        """
        self.db_path = db_path or self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"SQLiteKeyValueStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    def get(self, key: str) -> str | None:
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        return None if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        """,
            (key, value),
        )
        self.conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
