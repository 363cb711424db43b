"""Session Storage — persists the client's current session between process runs.

Invariants:
    - save() is atomic: readers see the old file or the new file, never a partial one
    - The session file is created with mode 0600 (it holds a bearer token)
    - load() never raises on bad content: corrupt or unreadable files mean "no session"
    - clear() is idempotent

Design Decisions:
    - JSON file over keyring: no platform dependency, easy to inspect
    - MemorySessionStorage for tests and for embedding the core in a server
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from jobtracker.schemas.auth import StoredSession

logger = logging.getLogger(__name__)


class FileSessionStorage:
    """Stores the session as a JSON document at a fixed path."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def load(self) -> StoredSession | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Session file unreadable: {e}")
            return None
        try:
            return StoredSession.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Session file corrupt, ignoring: {e}")
            return None

    def save(self, session: StoredSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".session-", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(session.model_dump_json())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class MemorySessionStorage:
    """In-process storage; survives only as long as the object."""

    def __init__(self, session: StoredSession | None = None):
        self._session = session

    def load(self) -> StoredSession | None:
        return self._session

    def save(self, session: StoredSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None
