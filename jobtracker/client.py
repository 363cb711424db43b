"""Client Bootstrap — wires one session manager and one record store for a client process.

Invariants:
    - One SessionManager per client; the RecordStore reads identity only
      through SessionManager.require_user_id
    - open_client() restores the persisted session before yielding, so the
      caller never sees LOADING unless it subscribes before start
    - Teardown drops subscribers and disposes the engine; the persisted
      session survives for the next run

Design Decisions:
    - Async context manager mirrors the API lifespan: setup, yield, cleanup
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from jobtracker.config import Settings, get_settings
from jobtracker.infrastructure.database import DatabaseSessionManager
from jobtracker.infrastructure.identity_provider import LocalIdentityProvider
from jobtracker.infrastructure.observability import setup_logging
from jobtracker.infrastructure.session_storage import FileSessionStorage
from jobtracker.services.record_store import RecordStore
from jobtracker.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


@dataclass
class TrackerClient:
    """Everything a presentation layer needs: auth lifecycle and records."""
    session: SessionManager
    records: RecordStore
    db: DatabaseSessionManager


def build_client(settings: Settings, db: DatabaseSessionManager) -> TrackerClient:
    provider = LocalIdentityProvider(
        db,
        secret_key=settings.auth_secret_key,
        token_ttl_seconds=settings.auth_token_ttl_seconds,
        password_rounds=settings.auth_password_rounds,
    )
    session = SessionManager(provider, FileSessionStorage(settings.session_file))
    records = RecordStore(db, identity=session.require_user_id)
    return TrackerClient(session=session, records=records, db=db)


@asynccontextmanager
async def open_client(settings: Settings | None = None) -> AsyncIterator[TrackerClient]:
    """Build the client, restore the session, and clean up on exit."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    client = build_client(settings, db)
    try:
        snapshot = await client.session.start()
        logger.info(
            "Client session restored", extra={"auth_state": snapshot.state.value},
        )
        yield client
    finally:
        await client.session.close()
        await db.dispose()
