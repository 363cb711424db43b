"""Owner Access Policy — declarative per-row predicates bound to the caller identity.

Invariants:
    - A session bound to an owner (bind_owner) only ever sees that owner's rows:
      every ORM SELECT, UPDATE and DELETE gets `user_id == owner` criteria for
      every OwnerScoped entity, including joined and aliased ones
    - Flushing a new, modified or deleted OwnerScoped row that belongs to a
      different owner raises OwnershipViolationError
    - user_id never changes after insert
    - On PostgreSQL every transaction of an owner-bound session sets
      app.current_user_id so row-level security policies can match it
    - Sessions without a bound owner are unrestricted (identity provider,
      migrations, test fixtures)

Design Decisions:
    - Works independently of the record store's own filters: a missing
      `.where(user_id == ...)` in a query still cannot leak rows
    - Events are registered on OwnerPolicySession only, never on the global
      Session class, so unrelated sessions are untouched
"""

import logging
import uuid

from sqlalchemy import event, inspect, text
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from jobtracker.core.errors import ErrorContext, OwnershipViolationError
from jobtracker.db.base import OwnerScoped

logger = logging.getLogger(__name__)

OWNER_KEY = "owner_id"


class OwnerPolicySession(Session):
    """Sync session class used behind every AsyncSession in the app."""
    pass


def bind_owner(session, owner_id: uuid.UUID) -> None:
    """Bind a (sync or async) session to an owner identity."""
    session.info[OWNER_KEY] = owner_id


def bound_owner(session) -> uuid.UUID | None:
    return session.info.get(OWNER_KEY)


@event.listens_for(OwnerPolicySession, "do_orm_execute")
def _add_owner_criteria(execute_state: ORMExecuteState) -> None:
    owner_id = bound_owner(execute_state.session)
    if owner_id is None:
        return
    if execute_state.is_select and (
        execute_state.is_column_load or execute_state.is_relationship_load
    ):
        # options on the parent statement already propagate to these loads
        return
    if not (
        execute_state.is_select
        or execute_state.is_update
        or execute_state.is_delete
    ):
        return
    execute_state.statement = execute_state.statement.options(
        with_loader_criteria(
            OwnerScoped,
            lambda cls: cls.user_id == owner_id,
            include_aliases=True,
        ),
    )


@event.listens_for(OwnerPolicySession, "before_flush")
def _check_owner_on_flush(session: Session, flush_context, instances) -> None:
    owner_id = bound_owner(session)
    if owner_id is None:
        return
    for obj in session.new:
        if isinstance(obj, OwnerScoped) and obj.user_id != owner_id:
            _reject(obj, owner_id, "insert for another owner")
    for obj in session.dirty:
        if not isinstance(obj, OwnerScoped):
            continue
        if inspect(obj).attrs.user_id.history.has_changes():
            _reject(obj, owner_id, "owner reassignment")
        if obj.user_id != owner_id:
            _reject(obj, owner_id, "update of another owner's row")
    for obj in session.deleted:
        if isinstance(obj, OwnerScoped) and obj.user_id != owner_id:
            _reject(obj, owner_id, "delete of another owner's row")


@event.listens_for(OwnerPolicySession, "after_begin")
def _set_rls_owner(session: Session, transaction, connection) -> None:
    owner_id = bound_owner(session)
    if owner_id is None or connection.dialect.name != "postgresql":
        return
    connection.execute(
        text("SELECT set_config('app.current_user_id', :owner_id, true)"),
        {"owner_id": str(owner_id)},
    )


def _reject(obj: OwnerScoped, owner_id: uuid.UUID, reason: str) -> None:
    table = getattr(obj, "__tablename__", type(obj).__name__)
    logger.error(
        f"Owner policy rejected {reason} on {table}",
        extra={"user_id": str(owner_id), "operation": "flush"},
    )
    raise OwnershipViolationError(
        f"Owner policy rejected {reason} on {table}",
        ErrorContext(user_id=str(owner_id), operation="flush"),
    )
