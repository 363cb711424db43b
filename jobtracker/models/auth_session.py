"""AuthSession ORM — one issued session token.

Invariants:
    - id equals the token's jti claim
    - A session is usable only while revoked_at is NULL and expires_at is in the future
"""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobtracker.db.base import Base
from jobtracker.db.types import UTCDateTime, utc_now


class AuthSession(Base):
    """Issued session, revocable by sign-out."""
    __tablename__ = "auth_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("auth_users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    issued_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True,
    )

    user: Mapped["AuthUser"] = relationship(
        "AuthUser", back_populates="sessions",
    )
