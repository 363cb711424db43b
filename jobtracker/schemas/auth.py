"""Auth Schemas — credentials and session contracts for the identity provider.

Invariants:
    - Credentials.email is trimmed and lower-cased
    - Credentials.password is 6-128 chars (never logged, never echoed back)
    - IssuedSession carries everything needed to restore the session later

Design Decisions:
    - Light e-mail shape check over email-validator: the provider only needs a
      stable unique key, deliverability is not checked
"""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from jobtracker.core.domain_types import EMAIL_MAX_LENGTH

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Credentials(BaseModel):
    """E-mail + password pair for sign-in and sign-up."""
    email: str = Field(max_length=EMAIL_MAX_LENGTH)
    password: str = Field(min_length=6, max_length=128, repr=False)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not _EMAIL_PATTERN.match(v):
            raise ValueError("invalid e-mail address")
        return v


class IssuedSession(BaseModel):
    """Session token issued by the identity provider."""
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    email: str
    expires_at: datetime


class StoredSession(BaseModel):
    """What session storage persists between process runs."""
    access_token: str
    user_id: UUID
    email: str
    expires_at: datetime
