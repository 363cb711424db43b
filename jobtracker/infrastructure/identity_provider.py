"""Local Identity Provider — password accounts, signed session tokens, revocable sessions.

Invariants:
    - Passwords stored only as passlib pbkdf2_sha512 hashes
    - sign_up creates AuthUser and its Profile in one transaction
    - Every issued token has a matching AuthSession row (jti == row id)
    - verify() accepts a token only if signature, expiry, and AuthSession
      (exists, same user, not revoked, not expired) all check out
    - Failures never say which credential was wrong

Design Decisions:
    - HS256 JWT with server-side session rows: tokens are self-describing for
      clients but still revocable by sign-out
    - Password hashing runs in a worker thread: pbkdf2 rounds would otherwise
      block the event loop
    - Expiry is second-granular (JWT exp is an int timestamp); expires_at is
      derived from the same int so token and row never disagree
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext
from sqlalchemy import select

from jobtracker.core.domain_types import AuthSessionId, UserId
from jobtracker.core.errors import (
    AuthenticationError, ErrorContext, SessionExpiredError,
)
from jobtracker.infrastructure.database import DatabaseSessionManager
from jobtracker.models.auth_session import AuthSession
from jobtracker.models.auth_user import AuthUser
from jobtracker.models.profile import Profile
from jobtracker.schemas.auth import IssuedSession

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class LocalIdentityProvider:
    """Identity provider backed by the auth_users / auth_sessions tables."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        secret_key: str,
        token_ttl_seconds: int = 3600,
        password_rounds: int = 300_000,
    ):
        self._db = db
        self._secret_key = secret_key
        self._token_ttl = timedelta(seconds=token_ttl_seconds)
        self._pwd_context = CryptContext(
            schemes=["pbkdf2_sha512"],
            deprecated="auto",
            pbkdf2_sha512__default_rounds=password_rounds,
        )

    # ─── Registration ────────────────────────────────────────────

    async def sign_up(self, email: str, password: str) -> UserId:
        """Create the account and its profile. Duplicate e-mail is an AuthenticationError."""
        email = email.strip().lower()
        password_hash = await asyncio.to_thread(self._pwd_context.hash, password)
        async with self._db.session() as db:
            existing = await db.execute(
                select(AuthUser.id).where(AuthUser.email == email),
            )
            if existing.scalar_one_or_none() is not None:
                raise AuthenticationError("Unable to sign up with these credentials")
            user = AuthUser(id=uuid.uuid4(), email=email, password_hash=password_hash)
            db.add(user)
            await db.flush()
            db.add(Profile(id=user.id, email=email))
            await db.commit()
        logger.info("Account created", extra={"user_id": str(user.id)})
        return UserId(user.id)

    # ─── Sessions ────────────────────────────────────────────────

    async def sign_in(self, email: str, password: str) -> IssuedSession:
        """Verify credentials and issue a new session token."""
        email = email.strip().lower()
        async with self._db.session() as db:
            result = await db.execute(select(AuthUser).where(AuthUser.email == email))
            user = result.scalar_one_or_none()
            if user is None or not await self._verify_password(
                password, user.password_hash,
            ):
                logger.warning("Sign-in rejected", extra={"operation": "sign_in"})
                raise AuthenticationError()

            now = datetime.now(timezone.utc).replace(microsecond=0)
            expires_at = now + self._token_ttl
            row = AuthSession(
                id=AuthSessionId(uuid.uuid4()), user_id=user.id,
                issued_at=now, expires_at=expires_at,
            )
            db.add(row)
            await db.commit()

        token = jwt.encode(
            {
                "sub": str(user.id),
                "jti": str(row.id),
                "email": user.email,
                "iat": int(now.timestamp()),
                "exp": int(expires_at.timestamp()),
            },
            self._secret_key,
            algorithm=ALGORITHM,
        )
        logger.info("Session issued", extra={"user_id": str(user.id)})
        return IssuedSession(
            access_token=token, user_id=user.id,
            email=user.email, expires_at=expires_at,
        )

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind a token. Unknown or already revoked tokens are ignored."""
        try:
            payload = jwt.decode(
                access_token, self._secret_key, algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
            session_id = AuthSessionId(uuid.UUID(payload["jti"]))
        except (jwt.InvalidTokenError, KeyError, ValueError):
            logger.info("Sign-out with unreadable token ignored")
            return
        async with self._db.session() as db:
            row = await db.get(AuthSession, session_id)
            if row is not None and row.revoked_at is None:
                row.revoked_at = datetime.now(timezone.utc)
                await db.commit()
                logger.info("Session revoked", extra={"user_id": str(row.user_id)})

    async def verify(self, access_token: str) -> UserId:
        """Return the user behind a token or raise AuthenticationError / SessionExpiredError."""
        payload = self._decode(access_token)
        try:
            user_id = uuid.UUID(payload["sub"])
            session_id = AuthSessionId(uuid.UUID(payload["jti"]))
        except (KeyError, ValueError, TypeError):
            raise AuthenticationError("Invalid session")

        async with self._db.session() as db:
            row = await db.get(AuthSession, session_id)
        if row is None or row.user_id != user_id or row.revoked_at is not None:
            raise AuthenticationError(
                "Invalid session", ErrorContext(user_id=str(user_id)),
            )
        if row.expires_at <= datetime.now(timezone.utc):
            raise SessionExpiredError(ErrorContext(user_id=str(user_id)))
        return UserId(user_id)

    # ─── Helpers ─────────────────────────────────────────────────

    def _decode(self, access_token: str) -> dict:
        try:
            return jwt.decode(
                access_token, self._secret_key, algorithms=[ALGORITHM],
            )
        except jwt.ExpiredSignatureError:
            raise SessionExpiredError()
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid session")

    async def _verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return await asyncio.to_thread(
                self._pwd_context.verify, password, password_hash,
            )
        except ValueError:
            # malformed stored hash
            return False
