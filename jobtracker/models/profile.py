"""Profile ORM — public mirror of an identity provider user.

Invariants:
    - id equals the AuthUser id (one-to-one, created on first sign-up)
    - Owned entities reference profiles.id as their user_id
"""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobtracker.core.domain_types import EMAIL_MAX_LENGTH
from jobtracker.db.base import Base
from jobtracker.db.types import UTCDateTime, utc_now


class Profile(Base):
    """User profile; root of everything a user owns."""
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("auth_users.id", ondelete="CASCADE"), primary_key=True,
    )
    email: Mapped[str | None] = mapped_column(
        String(EMAIL_MAX_LENGTH), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )

    auth_user: Mapped["AuthUser"] = relationship(
        "AuthUser", back_populates="profile",
    )
