"""Auth State — pure state machine for the client session lifecycle.

Invariants:
    - States: LOADING, ANONYMOUS, AUTHENTICATED(user)
    - Initial state is LOADING; nothing transitions INTO loading
    - LOADING only leaves through the initial restore resolution
    - AUTHENTICATED(a) -> AUTHENTICATED(b) is an identity change
    - A snapshot is immutable; every transition produces a new one

Design Decisions:
    - Frozen dataclass + pure functions: the session manager owns the IO,
      this module owns the rules (testable without mocks)
    - check_transition raises SessionStateError instead of returning a dict:
      the only caller is the session manager, which propagates it
"""

from dataclasses import dataclass
from datetime import datetime

from jobtracker.core.domain_types import AuthState, UserId
from jobtracker.core.errors import SessionStateError


@dataclass(frozen=True)
class AuthSnapshot:
    """Observable session value handed to subscribers."""
    state: AuthState
    user_id: UserId | None = None
    email: str | None = None
    expires_at: datetime | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self.state == AuthState.LOADING


LOADING = AuthSnapshot(AuthState.LOADING)
ANONYMOUS = AuthSnapshot(AuthState.ANONYMOUS)


def authenticated(
    user_id: UserId, email: str | None = None, expires_at: datetime | None = None,
) -> AuthSnapshot:
    return AuthSnapshot(AuthState.AUTHENTICATED, user_id, email, expires_at)


_ALLOWED: dict[AuthState, set[AuthState]] = {
    AuthState.LOADING: {AuthState.ANONYMOUS, AuthState.AUTHENTICATED},
    AuthState.ANONYMOUS: {AuthState.ANONYMOUS, AuthState.AUTHENTICATED},
    AuthState.AUTHENTICATED: {AuthState.ANONYMOUS, AuthState.AUTHENTICATED},
}


def check_transition(current: AuthSnapshot, target: AuthSnapshot) -> None:
    """Raise SessionStateError if current -> target is not a legal move."""
    if target.state not in _ALLOWED[current.state]:
        raise SessionStateError(
            f"Illegal session transition: {current.state.value} -> {target.state.value}",
        )


def check_resolved(current: AuthSnapshot, action: str) -> None:
    """Sign-in and sign-out are only allowed once restore has resolved."""
    if current.is_loading:
        raise SessionStateError(
            f"Cannot {action} before the session has been restored",
        )


def is_observable_change(previous: AuthSnapshot, current: AuthSnapshot) -> bool:
    """True when subscribers must hear about the move previous -> current."""
    if previous.state != current.state:
        return True
    return previous.is_authenticated and previous.user_id != current.user_id


def is_expired(snapshot: AuthSnapshot, now: datetime) -> bool:
    return (
        snapshot.is_authenticated
        and snapshot.expires_at is not None
        and snapshot.expires_at <= now
    )
