"""Session Manager — the one current session of a running client, with observers.

Invariants:
    - Exactly one AuthSnapshot is current; it starts as LOADING
    - start() resolves LOADING exactly once (restore from storage, verified by the provider)
    - While LOADING every require_user_id() call raises PermissionDeniedError
    - A failed sign-in leaves the current snapshot and storage untouched
    - Successful sign-in persists the session before subscribers are notified
    - If the session cannot be persisted, sign-in revokes the new token and
      raises AuthenticationError; the current snapshot is untouched
    - sign_out() clears storage and the current session even if the provider
      cannot be reached
    - Subscribers are called synchronously, in subscription order, once per
      observable transition; one failing subscriber never blocks the others
    - unsubscribe is deterministic and idempotent

Design Decisions:
    - Identity exposed only through require_user_id / current_user_id: the
      record store receives require_user_id as its identity accessor, so no
      component reads a bare global
    - Transition rules live in core/auth_state.py (pure); this class does IO
    - Session storage IO runs in a worker thread, as password hashing does in
      the identity provider; expire() stays synchronous because
      require_user_id() calls it
    - A restore that fails on storage/network errors resolves ANONYMOUS but keeps
      the stored token so the next process start can retry
"""

import asyncio
import logging
from datetime import datetime, timezone
from itertools import count
from typing import Callable

from jobtracker.core.auth_state import (
    ANONYMOUS, LOADING, AuthSnapshot, authenticated,
    check_resolved, check_transition, is_expired, is_observable_change,
)
from jobtracker.core.domain_types import UserId
from jobtracker.core.errors import (
    AuthenticationError, DatabaseError, PermissionDeniedError,
)
from jobtracker.core.repository_protocols import IdentityProvider, SessionStorage
from jobtracker.schemas.auth import Credentials, IssuedSession, StoredSession

logger = logging.getLogger(__name__)

Listener = Callable[[AuthSnapshot], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Owns sign-in, sign-out, restore and change notification for one client."""

    def __init__(
        self,
        provider: IdentityProvider,
        storage: SessionStorage,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._provider = provider
        self._storage = storage
        self._clock = clock
        self._snapshot: AuthSnapshot = LOADING
        self._access_token: str | None = None
        self._listeners: dict[int, Listener] = {}
        self._listener_ids = count()

    async def __aenter__(self) -> "SessionManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ─── Accessors ───────────────────────────────────────────────

    @property
    def state(self) -> AuthSnapshot:
        return self._snapshot

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def current_user_id(self) -> UserId | None:
        if self._snapshot.is_authenticated and not is_expired(
            self._snapshot, self._clock(),
        ):
            return self._snapshot.user_id
        return None

    def require_user_id(self) -> UserId:
        """Identity accessor for data access. Raises PermissionDeniedError unless authenticated."""
        if self._snapshot.is_loading:
            raise PermissionDeniedError("Session is still loading")
        if is_expired(self._snapshot, self._clock()):
            self.expire()
            raise PermissionDeniedError("Session expired")
        if not self._snapshot.is_authenticated:
            raise PermissionDeniedError()
        return self._snapshot.user_id

    # ─── Lifecycle ───────────────────────────────────────────────

    async def start(self) -> AuthSnapshot:
        """Restore a persisted session. Idempotent once resolved."""
        if not self._snapshot.is_loading:
            return self._snapshot

        stored = await asyncio.to_thread(self._storage.load)
        if stored is None:
            self._transition(ANONYMOUS)
            return self._snapshot

        try:
            user_id = await self._provider.verify(stored.access_token)
        except AuthenticationError as e:
            logger.info(
                f"Stored session rejected: {e.message}",
                extra={"error_code": e.code, "user_id": str(stored.user_id)},
            )
            await asyncio.to_thread(self._storage.clear)
            self._transition(ANONYMOUS)
            return self._snapshot
        except DatabaseError as e:
            logger.warning(
                f"Session restore failed, continuing anonymous: {e.message}",
                extra={"error_code": e.code},
            )
            self._transition(ANONYMOUS)
            return self._snapshot

        self._access_token = stored.access_token
        self._transition(authenticated(user_id, stored.email, stored.expires_at))
        return self._snapshot

    async def close(self) -> None:
        """Drop all subscribers. The persisted session stays for the next start()."""
        self._listeners.clear()

    # ─── Auth operations ─────────────────────────────────────────

    async def sign_in(self, credentials: Credentials) -> IssuedSession:
        """Exchange credentials for a session and make it current."""
        check_resolved(self._snapshot, "sign in")
        try:
            issued = await self._provider.sign_in(
                credentials.email, credentials.password,
            )
        except DatabaseError as e:
            raise AuthenticationError("Sign-in failed, try again") from e

        previous_token = self._access_token
        try:
            await asyncio.to_thread(self._storage.save, StoredSession(
                access_token=issued.access_token, user_id=issued.user_id,
                email=issued.email, expires_at=issued.expires_at,
            ))
        except OSError as e:
            logger.error(
                f"Could not persist session: {e}",
                extra={"user_id": str(issued.user_id), "operation": "sign_in"},
            )
            await self._revoke_quietly(issued.access_token)
            raise AuthenticationError("Sign-in failed, try again") from e
        self._access_token = issued.access_token
        self._transition(
            authenticated(UserId(issued.user_id), issued.email, issued.expires_at),
        )
        if previous_token and previous_token != issued.access_token:
            await self._revoke_quietly(previous_token)
        return issued

    async def sign_up(self, credentials: Credentials) -> IssuedSession:
        """Register a new account, then sign in with the same credentials."""
        check_resolved(self._snapshot, "sign up")
        try:
            await self._provider.sign_up(credentials.email, credentials.password)
        except DatabaseError as e:
            raise AuthenticationError("Sign-up failed, try again") from e
        return await self.sign_in(credentials)

    async def sign_out(self) -> None:
        """Revoke and forget the current session. No-op when already anonymous."""
        check_resolved(self._snapshot, "sign out")
        token = self._access_token
        try:
            await asyncio.to_thread(self._storage.clear)
        except OSError as e:
            # the token is revoked below, so a stale file cannot be restored
            logger.warning(
                f"Could not remove stored session: {e}",
                extra={"operation": "sign_out"},
            )
        self._access_token = None
        if not self._snapshot.is_authenticated:
            return
        user_id = self._snapshot.user_id
        self._transition(ANONYMOUS)
        if token:
            await self._revoke_quietly(token)
        logger.info("Signed out", extra={"user_id": str(user_id)})

    def expire(self) -> None:
        """Session-expiry notification: drop an authenticated session."""
        if not self._snapshot.is_authenticated:
            return
        logger.info(
            "Session expired",
            extra={"user_id": str(self._snapshot.user_id), "auth_state": "expired"},
        )
        self._storage.clear()
        self._access_token = None
        self._transition(ANONYMOUS)

    # ─── Observers ───────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        listener_id = next(self._listener_ids)
        self._listeners[listener_id] = listener

        def unsubscribe() -> None:
            self._listeners.pop(listener_id, None)

        return unsubscribe

    # ─── Internals ───────────────────────────────────────────────

    def _transition(self, target: AuthSnapshot) -> None:
        previous = self._snapshot
        check_transition(previous, target)
        self._snapshot = target
        if is_observable_change(previous, target):
            logger.debug(
                f"Session {previous.state.value} -> {target.state.value}",
                extra={"auth_state": target.state.value},
            )
            self._notify(target)

    def _notify(self, snapshot: AuthSnapshot) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Session listener failed")

    async def _revoke_quietly(self, token: str) -> None:
        try:
            await self._provider.sign_out(token)
        except (DatabaseError, AuthenticationError) as e:
            logger.warning(
                f"Provider sign-out failed: {e.message}",
                extra={"error_code": e.code},
            )
