"""Identity Provider — accounts, token issuance, verification and revocation.

Invariants:
    - sign_up creates a profile mirroring the account
    - Wrong password and unknown e-mail fail with the same generic error
    - verify accepts only live, unrevoked tokens signed with our key
    - Expired tokens raise SessionExpiredError
"""

from datetime import datetime, timedelta, timezone

import uuid

import jwt
import pytest
from sqlalchemy import select

from jobtracker.core.errors import AuthenticationError, SessionExpiredError
from jobtracker.infrastructure.identity_provider import LocalIdentityProvider
from jobtracker.models.auth_session import AuthSession
from jobtracker.models.profile import Profile


async def test_sign_up_creates_profile(provider, db_manager):
    user_id = await provider.sign_up("New@Example.com ", "hunter22")
    async with db_manager.session() as db:
        profile = await db.get(Profile, user_id)
    assert profile is not None
    assert profile.email == "new@example.com"


async def test_duplicate_sign_up_is_rejected(provider):
    await provider.sign_up("dup@example.com", "hunter22")
    with pytest.raises(AuthenticationError):
        await provider.sign_up("DUP@example.com", "another1")


async def test_sign_in_issues_verifiable_token(provider):
    user_id = await provider.sign_up("a@example.com", "hunter22")
    issued = await provider.sign_in("a@example.com", "hunter22")
    assert issued.user_id == user_id
    assert issued.expires_at > datetime.now(timezone.utc)
    assert await provider.verify(issued.access_token) == user_id


async def test_wrong_password_and_unknown_email_look_the_same(provider):
    await provider.sign_up("a@example.com", "hunter22")
    with pytest.raises(AuthenticationError) as wrong_password:
        await provider.sign_in("a@example.com", "nope-nope")
    with pytest.raises(AuthenticationError) as unknown_email:
        await provider.sign_in("b@example.com", "hunter22")
    assert wrong_password.value.message == unknown_email.value.message


async def test_sign_out_revokes_token(provider, db_manager):
    await provider.sign_up("a@example.com", "hunter22")
    issued = await provider.sign_in("a@example.com", "hunter22")
    await provider.sign_out(issued.access_token)

    with pytest.raises(AuthenticationError):
        await provider.verify(issued.access_token)
    async with db_manager.session() as db:
        result = await db.execute(select(AuthSession))
        assert result.scalar_one().revoked_at is not None


async def test_sign_out_ignores_garbage(provider):
    await provider.sign_out("not-a-token")


async def test_token_signed_with_other_key_is_rejected(provider):
    user_id = await provider.sign_up("a@example.com", "hunter22")
    forged = jwt.encode(
        {"sub": str(user_id), "jti": str(user_id), "exp": 4102444800},
        "some-other-key", algorithm="HS256",
    )
    with pytest.raises(AuthenticationError):
        await provider.verify(forged)


async def test_expired_token_raises_session_expired(db_manager):
    short_lived = LocalIdentityProvider(
        db_manager, secret_key="k", token_ttl_seconds=-10, password_rounds=1000,
    )
    await short_lived.sign_up("a@example.com", "hunter22")
    issued = await short_lived.sign_in("a@example.com", "hunter22")
    with pytest.raises(SessionExpiredError):
        await short_lived.verify(issued.access_token)


async def test_each_sign_in_is_a_separate_session(provider, db_manager):
    await provider.sign_up("a@example.com", "hunter22")
    first = await provider.sign_in("a@example.com", "hunter22")
    second = await provider.sign_in("a@example.com", "hunter22")
    await provider.sign_out(first.access_token)

    assert await provider.verify(second.access_token)
    with pytest.raises(AuthenticationError):
        await provider.verify(first.access_token)


async def test_session_row_expiry_matches_token(provider, db_manager):
    await provider.sign_up("a@example.com", "hunter22")
    issued = await provider.sign_in("a@example.com", "hunter22")
    payload = jwt.decode(
        issued.access_token, options={"verify_signature": False},
    )
    async with db_manager.session() as db:
        row = await db.get(AuthSession, uuid.UUID(payload["jti"]))
    assert row.expires_at == issued.expires_at
    assert int(row.expires_at.timestamp()) == payload["exp"]
    assert row.expires_at - row.issued_at == timedelta(hours=1)
