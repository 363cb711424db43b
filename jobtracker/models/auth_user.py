"""AuthUser ORM — the identity provider's account record.

Invariants:
    - email is unique and stored lower-cased
    - password_hash is a passlib hash string, never the plain password
    - deleting an AuthUser cascades to its Profile and sessions
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobtracker.core.domain_types import EMAIL_MAX_LENGTH
from jobtracker.db.base import Base
from jobtracker.db.types import UTCDateTime, utc_now


class AuthUser(Base):
    """Credential-bearing account owned by the identity provider."""
    __tablename__ = "auth_users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH), nullable=False, unique=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )

    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="auth_user",
        cascade="all, delete-orphan", passive_deletes=True, uselist=False,
    )
    sessions: Mapped[list["AuthSession"]] = relationship(
        "AuthSession", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
