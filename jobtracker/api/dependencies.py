"""API Dependencies — per-request identity and record store wiring.

Invariants:
    - Every data route resolves the bearer token through the identity provider
    - Missing, invalid, revoked or expired tokens all raise PermissionDeniedError (401)
    - The record store handed to a route is bound to that request's user only

Design Decisions:
    - No server-side session manager: a server has many callers, so identity is
      per request; the record store only needs an identity accessor
    - HTTPBearer(auto_error=False): missing credentials go through our error
      envelope instead of FastAPI's default 403
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobtracker.config import get_settings
from jobtracker.core.domain_types import UserId
from jobtracker.core.errors import AuthenticationError, PermissionDeniedError
from jobtracker.infrastructure.database import DatabaseSessionManager, get_db_manager
from jobtracker.infrastructure.identity_provider import LocalIdentityProvider
from jobtracker.services.record_store import RecordStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_provider(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> LocalIdentityProvider:
    settings = get_settings()
    return LocalIdentityProvider(
        db,
        secret_key=settings.auth_secret_key,
        token_ttl_seconds=settings.auth_token_ttl_seconds,
        password_rounds=settings.auth_password_rounds,
    )


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise PermissionDeniedError()
    return credentials.credentials


async def get_current_user_id(
    token: str = Depends(get_bearer_token),
    provider: LocalIdentityProvider = Depends(get_identity_provider),
) -> UserId:
    try:
        return await provider.verify(token)
    except AuthenticationError as e:
        raise PermissionDeniedError("Invalid or expired session", e.context)


def get_record_store(
    user_id: UserId = Depends(get_current_user_id),
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> RecordStore:
    return RecordStore(db, identity=lambda: user_id)
