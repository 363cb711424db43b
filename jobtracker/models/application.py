"""Application ORM — one job application.

Invariants:
    - user_id (from OwnerScoped) set once at creation, never reassigned (enforced by access_policy)
    - status constrained to ApplicationStatus values by a CHECK constraint
    - updated_at refreshed on every mutation
    - cascade delete for tasks: an application owns all its tasks

Design Decisions:
    - String column + CHECK over a native ENUM: same DDL on PostgreSQL and SQLite
    - Both ORM cascade and ON DELETE CASCADE: either path removes the tasks
"""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobtracker.core.domain_types import (
    ApplicationStatus, COMPANY_MAX_LENGTH, POSITION_MAX_LENGTH,
)
from jobtracker.db.base import Base, OwnerScoped
from jobtracker.db.types import UTCDateTime, utc_now

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in ApplicationStatus)


class Application(OwnerScoped, Base):
    """Job application — parent of follow-up tasks."""
    __tablename__ = "applications"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="valid_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    company: Mapped[str] = mapped_column(
        String(COMPANY_MAX_LENGTH), nullable=False,
    )
    position: Mapped[str] = mapped_column(
        String(POSITION_MAX_LENGTH), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationStatus.APPLIED.value,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )

    tasks: Mapped[list["Task"]] = relationship(
        "Task", back_populates="application",
        cascade="all, delete-orphan", passive_deletes=True,
    )
