"""Session Storage — file persistence used by restore-on-start.

Invariants:
    - save → load returns the same session
    - Missing or corrupt files load as None
    - The session file is private (0600)
    - clear() is idempotent
"""

import os
import stat
from datetime import datetime, timezone
from uuid import uuid4

from jobtracker.infrastructure.session_storage import (
    FileSessionStorage, MemorySessionStorage,
)
from jobtracker.schemas.auth import StoredSession


def _stored() -> StoredSession:
    return StoredSession(
        access_token="token-abc",
        user_id=uuid4(),
        email="a@example.com",
        expires_at=datetime(2026, 5, 1, tzinfo=timezone.utc),
    )


def test_load_returns_none_when_file_missing(tmp_path):
    storage = FileSessionStorage(tmp_path / "session.json")
    assert storage.load() is None


def test_save_then_load(tmp_path):
    storage = FileSessionStorage(tmp_path / "nested" / "session.json")
    session = _stored()
    storage.save(session)
    assert storage.load() == session


def test_session_file_is_private(tmp_path):
    path = tmp_path / "session.json"
    FileSessionStorage(path).save(_stored())
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_save_leaves_no_temp_files(tmp_path):
    storage = FileSessionStorage(tmp_path / "session.json")
    storage.save(_stored())
    storage.save(_stored())
    assert [p.name for p in tmp_path.iterdir()] == ["session.json"]


def test_corrupt_file_loads_as_none(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    assert FileSessionStorage(path).load() is None


def test_wrong_shape_loads_as_none(tmp_path):
    path = tmp_path / "session.json"
    path.write_text('{"access_token": 1}', encoding="utf-8")
    assert FileSessionStorage(path).load() is None


def test_clear_is_idempotent(tmp_path):
    storage = FileSessionStorage(tmp_path / "session.json")
    storage.save(_stored())
    storage.clear()
    storage.clear()
    assert storage.load() is None


def test_memory_storage_round_trip():
    storage = MemorySessionStorage()
    session = _stored()
    storage.save(session)
    assert storage.load() is session
    storage.clear()
    assert storage.load() is None
