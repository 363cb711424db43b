"""Auth Routes — sign-up, sign-in and sign-out against the identity provider.

Invariants:
    - Sign-in failures return one generic message (never which field was wrong)
    - Sign-up returns a session immediately (no e-mail confirmation step)
    - Sign-out revokes the presented token; unknown tokens are ignored
"""

import logging

from fastapi import APIRouter, Depends, status

from jobtracker.api.dependencies import get_bearer_token, get_identity_provider
from jobtracker.infrastructure.identity_provider import LocalIdentityProvider
from jobtracker.schemas.auth import Credentials, IssuedSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/sign-up", response_model=IssuedSession,
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(
    body: Credentials,
    provider: LocalIdentityProvider = Depends(get_identity_provider),
):
    """Register and sign in."""
    await provider.sign_up(body.email, body.password)
    return await provider.sign_in(body.email, body.password)


@router.post("/sign-in", response_model=IssuedSession)
async def sign_in(
    body: Credentials,
    provider: LocalIdentityProvider = Depends(get_identity_provider),
):
    return await provider.sign_in(body.email, body.password)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    token: str = Depends(get_bearer_token),
    provider: LocalIdentityProvider = Depends(get_identity_provider),
):
    await provider.sign_out(token)
