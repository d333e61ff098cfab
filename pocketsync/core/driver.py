"""Decide whether a run authorizes or syncs, and carry it out."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pocketsync.config import (
    ConfigError,
    ConfigMissing,
    Credentials,
    Settings,
    load_credentials,
    save_credentials,
)
from pocketsync.core.api import DecodeError, PocketClient, TransportError
from pocketsync.core.auth import (
    AuthorizationAborted,
    ConfirmCallback,
    authorize,
    needs_authorization,
    validate_session,
)
from pocketsync.core.sync import SyncReport, sync_links
from pocketsync.index.db import Database, PersistenceError

logger = logging.getLogger(__name__)

BRANCH_MISSING_CONFIG = "missing-config"
BRANCH_AUTHORIZE = "authorize"
BRANCH_SYNC = "sync"


@dataclass
class RunResult:
    """What a run did."""

    exit_code: int
    branch: str
    credentials: Credentials | None = None
    report: SyncReport | None = None
    error: str | None = None
    saved: bool = False  # True if the credential document was rewritten


def run(
    settings: Settings,
    confirm: ConfirmCallback,
    client: PocketClient | None = None,
    db: Database | None = None,
) -> RunResult:
    """Run one authorization-or-sync pass.

    Only a missing or unreadable config file gives a non-zero exit code.
    Network and storage failures are logged and the run ends with 0.

    Args:
        settings: Runtime settings (config path, database path, ...)
        confirm: Called with the authorize URL; must block until the user
            has approved the app
        client: Pocket client to use. Created (and closed) here if omitted.
        db: Database to sync into. Created (and closed) here if omitted.
    """
    try:
        credentials = load_credentials(settings.config_path)
    except ConfigMissing as e:
        logger.error("%s", e)
        return RunResult(exit_code=1, branch=BRANCH_MISSING_CONFIG, error=str(e))
    except ConfigError as e:
        logger.error("Invalid config: %s", e)
        return RunResult(exit_code=1, branch=BRANCH_MISSING_CONFIG, error=str(e))

    owns_client = client is None
    if client is None:
        client = PocketClient(credentials.api_endpoint, timeout=settings.timeout)

    try:
        credentials = validate_session(client, credentials)
        if needs_authorization(credentials):
            return _run_authorization(client, credentials, settings, confirm)
        logger.info("Session is valid")
        return _run_sync(client, credentials, settings, db)
    finally:
        if owns_client:
            client.close()


def _run_authorization(
    client: PocketClient,
    credentials: Credentials,
    settings: Settings,
    confirm: ConfirmCallback,
) -> RunResult:
    try:
        credentials = authorize(client, credentials, confirm, settings.authorize_base)
    except (TransportError, DecodeError, AuthorizationAborted) as e:
        logger.error("Cannot authorize: %s", e)
        return RunResult(
            exit_code=0, branch=BRANCH_AUTHORIZE, credentials=credentials, error=str(e)
        )

    try:
        save_credentials(credentials, settings.config_path)
    except OSError as e:
        logger.error("Cannot write config to %s: %s", settings.config_path, e)
        return RunResult(
            exit_code=0, branch=BRANCH_AUTHORIZE, credentials=credentials, error=str(e)
        )

    logger.info("Updated config written to %s", settings.config_path)
    return RunResult(
        exit_code=0, branch=BRANCH_AUTHORIZE, credentials=credentials, saved=True
    )


def _run_sync(
    client: PocketClient,
    credentials: Credentials,
    settings: Settings,
    db: Database | None,
) -> RunResult:
    owns_db = db is None
    if db is None:
        db = Database(settings.db_path)

    try:
        report = sync_links(client, credentials, db)
    except (TransportError, DecodeError, PersistenceError) as e:
        logger.error("Cannot sync links: %s", e)
        return RunResult(
            exit_code=0, branch=BRANCH_SYNC, credentials=credentials, error=str(e)
        )
    finally:
        if owns_db:
            db.close()

    return RunResult(
        exit_code=0, branch=BRANCH_SYNC, credentials=credentials, report=report
    )
