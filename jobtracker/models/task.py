"""Task ORM — a follow-up action tied to one application.

Invariants:
    - Always belongs to an Application (application_id FK, ON DELETE CASCADE)
    - user_id (from OwnerScoped) equals the parent application's user_id
    - due_date is a calendar date (no time component)
"""

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobtracker.core.domain_types import TITLE_MAX_LENGTH
from jobtracker.db.base import Base, OwnerScoped
from jobtracker.db.types import UTCDateTime, utc_now


class Task(OwnerScoped, Base):
    """Follow-up task for an application."""
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    application_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )

    application: Mapped["Application"] = relationship(
        "Application", back_populates="tasks",
    )
