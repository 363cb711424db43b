"""SQLAlchemy Declarative Base — shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Owned entities also inherit OwnerScoped, which declares their user_id
      column, so the access policy can filter on OwnerScoped.user_id

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - user_id declared on the mixin: with_loader_criteria evaluates its
      predicate against the mixin as well as every mapped subclass
"""

import uuid

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Base class for all job tracker ORM models."""
    pass


class OwnerScoped:
    """Mixin for rows that belong to exactly one user."""

    @declared_attr
    def user_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            Uuid, ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False, index=True,
        )
