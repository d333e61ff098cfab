"""SQLite database management for pocketsync."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

# Current schema version
SCHEMA_VERSION = 2

# Phase 1 schema: archived links
SCHEMA_V1 = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

-- Links fetched from Pocket
CREATE TABLE IF NOT EXISTS links (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    resolved_title TEXT,
    item_id TEXT,
    time_added TEXT,
    url TEXT
);
"""

# Phase 2 additions: more link metadata, one row per Pocket item
SCHEMA_V2 = """
ALTER TABLE links ADD COLUMN given_title TEXT;
ALTER TABLE links ADD COLUMN excerpt TEXT;
ALTER TABLE links ADD COLUMN favorite INTEGER DEFAULT 0;
ALTER TABLE links ADD COLUMN status INTEGER DEFAULT 0;
ALTER TABLE links ADD COLUMN word_count INTEGER;
ALTER TABLE links ADD COLUMN lang TEXT;
ALTER TABLE links ADD COLUMN time_updated TEXT;
ALTER TABLE links ADD COLUMN time_read TEXT;
ALTER TABLE links ADD COLUMN time_favorited TEXT;
ALTER TABLE links ADD COLUMN synced_at TEXT;

-- Collapse rows duplicated by earlier append-only syncs, keeping the newest
DELETE FROM links
WHERE id NOT IN (SELECT MAX(id) FROM links GROUP BY item_id);

CREATE UNIQUE INDEX IF NOT EXISTS idx_links_item_id ON links(item_id);
CREATE INDEX IF NOT EXISTS idx_links_time_added ON links(time_added);
"""

# Migration scripts (indexed by target version)
MIGRATIONS: dict[int, str] = {
    1: SCHEMA_V1,
    2: SCHEMA_V2,
}


class PersistenceError(Exception):
    """Raised when the local link store cannot be written."""

    pass


class Database:
    """SQLite database connection manager."""

    def __init__(self, path: Path):
        self.path = path
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def connect(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        if self._conn is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        """Execute a SQL statement."""
        return self.connect().execute(sql, params)

    def fetchone(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Row | None:
        """Execute a query and fetch one row."""
        return self.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        """Execute a query and fetch all rows."""
        return self.execute(sql, params).fetchall()

    def commit(self) -> None:
        """Commit the current transaction."""
        if self._conn is not None:
            self._conn.commit()


def get_schema_version(db: Database) -> int:
    """Get the current schema version, or 0 if not initialized."""
    try:
        row = db.fetchone("SELECT version FROM schema_version")
        return row["version"] if row else 0
    except sqlite3.OperationalError:
        # Table doesn't exist
        return 0


def set_schema_version(db: Database, version: int) -> None:
    """Set the schema version."""
    db.execute("DELETE FROM schema_version")
    db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))
    db.commit()


def apply_migrations(db: Database) -> None:
    """Apply any pending schema migrations."""
    current = get_schema_version(db)

    for version in sorted(MIGRATIONS.keys()):
        if version > current:
            db.connect().executescript(MIGRATIONS[version])
            set_schema_version(db, version)


def init_db(db: Database) -> None:
    """Initialize the database schema.

    Creates tables if they don't exist and applies any pending migrations.
    Safe to call any number of times.

    Raises:
        PersistenceError: If the schema cannot be created
    """
    try:
        apply_migrations(db)
    except sqlite3.Error as e:
        raise PersistenceError(f"Cannot initialize database {db.path}: {e}") from e
