"""Link database operations for pocketsync."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from pocketsync.index.db import PersistenceError

if TYPE_CHECKING:
    from pocketsync.core.links import LinkRecord
    from pocketsync.index.db import Database


@dataclass
class StoredLink:
    """A row of the local links table."""

    id: int
    item_id: str
    resolved_title: str
    url: str
    time_added: str
    favorite: bool = False
    synced_at: str | None = None


def _row_to_link(row: sqlite3.Row) -> StoredLink:
    """Convert a database row to a StoredLink object."""
    return StoredLink(
        id=row["id"],
        item_id=row["item_id"],
        resolved_title=row["resolved_title"] or "",
        url=row["url"] or "",
        time_added=row["time_added"] or "",
        favorite=bool(row["favorite"]),
        synced_at=row["synced_at"],
    )


def _as_int_or_none(value: str) -> int | None:
    return int(value) if value.isdigit() else None


def upsert_link(record: LinkRecord, db: Database) -> None:
    """Insert a link, or refresh the existing row for the same item_id.

    A missing resolved title is stored as an empty string.

    Raises:
        PersistenceError: If the row cannot be written
    """
    now = datetime.now().isoformat(timespec="seconds")
    try:
        db.execute(
            """
            INSERT INTO links
            (resolved_title, item_id, time_added, url, given_title, excerpt,
             favorite, status, word_count, lang, time_updated, time_read,
             time_favorited, synced_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(item_id) DO UPDATE SET
                resolved_title = excluded.resolved_title,
                time_added = excluded.time_added,
                url = excluded.url,
                given_title = excluded.given_title,
                excerpt = excluded.excerpt,
                favorite = excluded.favorite,
                status = excluded.status,
                word_count = excluded.word_count,
                lang = excluded.lang,
                time_updated = excluded.time_updated,
                time_read = excluded.time_read,
                time_favorited = excluded.time_favorited,
                synced_at = excluded.synced_at
            """,
            (
                record.resolved_title or "",
                record.item_id,
                record.time_added,
                record.url,
                record.given_title,
                record.excerpt,
                1 if record.favorite == "1" else 0,
                _as_int_or_none(record.status) or 0,
                _as_int_or_none(record.word_count),
                record.lang,
                record.time_updated,
                record.time_read,
                record.time_favorited,
                now,
            ),
        )
        db.commit()
    except sqlite3.Error as e:
        raise PersistenceError(f"Cannot store link {record.item_id}: {e}") from e


def count_links(db: Database) -> int:
    """Count stored links."""
    row = db.fetchone("SELECT COUNT(*) AS n FROM links")
    return row["n"] if row else 0


def get_link(item_id: str, db: Database) -> StoredLink | None:
    """Get a stored link by its Pocket item id."""
    row = db.fetchone("SELECT * FROM links WHERE item_id = ?", (item_id,))
    return _row_to_link(row) if row else None


def list_links(db: Database, limit: int | None = None) -> list[StoredLink]:
    """List stored links, most recently added first.

    Args:
        db: Database to read from.
        limit: Maximum rows to return (None for all).
    """
    # time_added is a unix timestamp string; cast so ordering is numeric
    sql = "SELECT * FROM links ORDER BY CAST(time_added AS INTEGER) DESC, id DESC"
    if limit is not None:
        rows = db.fetchall(sql + " LIMIT ?", (limit,))
    else:
        rows = db.fetchall(sql)
    return [_row_to_link(row) for row in rows]
