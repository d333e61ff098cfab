"""Sync Pocket links into the local database."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from pocketsync.config.models import Credentials
from pocketsync.core.api import PocketClient
from pocketsync.core.links import LinkRecord, fetch_links
from pocketsync.index.db import Database, PersistenceError, init_db
from pocketsync.index.links_repo import upsert_link

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Outcome of one sync run."""

    total: int = 0
    inserted: int = 0
    failed: list[tuple[str, str]] = field(default_factory=list)  # (item_id, error)
    elapsed: float = 0.0  # Seconds

    @property
    def ok(self) -> bool:
        """True if every record was stored."""
        return not self.failed

    def summary(self) -> str:
        return (
            f"Stored {self.inserted}/{self.total} links in {self.elapsed:.2f}s"
            + (f" ({len(self.failed)} failed)" if self.failed else "")
        )


def reconcile(records: list[LinkRecord], db: Database) -> SyncReport:
    """Write fetched records to the local store, one record at a time.

    Each record is committed on its own. A record that cannot be stored is
    logged and skipped; the rest of the batch still runs.

    Raises:
        PersistenceError: If the schema itself cannot be created
    """
    started = time.perf_counter()
    report = SyncReport(total=len(records))

    init_db(db)

    for record in records:
        if record.resolved_title is None:
            logger.debug("Link %s has no resolved title", record.item_id)
        try:
            upsert_link(record, db)
        except PersistenceError as e:
            logger.warning("Skipping link %s: %s", record.item_id, e)
            report.failed.append((record.item_id, str(e)))
            continue
        report.inserted += 1

    report.elapsed = time.perf_counter() - started
    return report


def sync_links(
    client: PocketClient, credentials: Credentials, db: Database
) -> SyncReport:
    """Fetch every saved link and store it locally.

    Raises:
        TransportError: If the fetch fails
        DecodeError: If the response cannot be parsed
        PersistenceError: If the schema cannot be created
    """
    started = time.perf_counter()
    records = fetch_links(client, credentials)
    report = reconcile(records, db)
    report.elapsed = time.perf_counter() - started
    logger.info("%s", report.summary())
    return report
