"""Service test fixtures — controllable clocks and caller-bound stores.

Invariants:
    - TickingClock advances one second per reading, so creation order is
      always reflected in created_at
    - alice and bob are distinct users with profiles
"""

from datetime import datetime, timedelta, timezone

import pytest

from jobtracker.core.errors import PermissionDeniedError
from jobtracker.services.record_store import RecordStore


class TickingClock:
    """Deterministic clock: every call returns a strictly later instant."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        self.now += self.step
        return self.now


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime.now(timezone.utc)

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
async def alice(make_user):
    return await make_user("alice@example.com")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob@example.com")


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def alice_store(db_manager, alice, clock):
    return RecordStore(db_manager, identity=lambda: alice, clock=clock)


@pytest.fixture
def bob_store(db_manager, bob, clock):
    return RecordStore(db_manager, identity=lambda: bob, clock=clock)


@pytest.fixture
def anonymous_store(db_manager):
    def no_identity():
        raise PermissionDeniedError()

    return RecordStore(db_manager, identity=no_identity)


@pytest.fixture
def frozen_clock():
    return FrozenClock()
