"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Environment defaults set before any jobtracker import reads settings
    - Every test gets a fresh in-memory SQLite database with the full schema
    - make_user inserts AuthUser + Profile directly (no password hashing cost)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; PostgreSQL-only features
      (row-level security) are covered by the ORM-level owner policy here
"""

import os
import uuid

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("AUTH_PASSWORD_ROUNDS", "1000")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from jobtracker.core.domain_types import UserId  # noqa: E402
from jobtracker.infrastructure.database import DatabaseSessionManager  # noqa: E402
from jobtracker.infrastructure.identity_provider import LocalIdentityProvider  # noqa: E402
from jobtracker.models.auth_user import AuthUser  # noqa: E402
from jobtracker.models.profile import Profile  # noqa: E402
from jobtracker.services.record_store import RecordStore  # noqa: E402

TEST_SECRET = "test-secret-key-not-for-production"


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
def make_user(db_manager):
    """Insert an account + profile and return its id."""
    async def _make_user(email: str | None = None) -> UserId:
        user_id = uuid.uuid4()
        email = email or f"{user_id.hex[:8]}@example.com"
        async with db_manager.session() as db:
            db.add(AuthUser(id=user_id, email=email, password_hash="!"))
            await db.flush()
            db.add(Profile(id=user_id, email=email))
            await db.commit()
        return UserId(user_id)

    return _make_user


@pytest.fixture
def store_for(db_manager):
    """Record store bound to a fixed caller."""
    def _store_for(user_id: UserId) -> RecordStore:
        return RecordStore(db_manager, identity=lambda: user_id)

    return _store_for


@pytest.fixture
def provider(db_manager):
    return LocalIdentityProvider(
        db_manager, secret_key=TEST_SECRET,
        token_ttl_seconds=3600, password_rounds=1000,
    )
