"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - The session manager depends on these protocols, not on concrete classes
    - Implementations provided by infrastructure via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async where implementations do IO (identity provider hits the database);
      session storage is sync because it is a small local file
"""

from typing import Callable, Protocol

from jobtracker.core.domain_types import UserId
from jobtracker.schemas.auth import IssuedSession, StoredSession


class IdentityProvider(Protocol):
    """Contract for the authentication boundary — implemented by infrastructure."""
    async def sign_up(self, email: str, password: str) -> UserId: ...
    async def sign_in(self, email: str, password: str) -> IssuedSession: ...
    async def sign_out(self, access_token: str) -> None: ...
    async def verify(self, access_token: str) -> UserId: ...


class SessionStorage(Protocol):
    """Contract for persisting the current session between process runs."""
    def load(self) -> StoredSession | None: ...
    def save(self, session: StoredSession) -> None: ...
    def clear(self) -> None: ...


# Reads the caller identity; raises PermissionDeniedError when there is none.
IdentityAccessor = Callable[[], UserId]
