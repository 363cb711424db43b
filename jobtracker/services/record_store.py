"""Record Store — owner-scoped CRUD over applications and tasks.

Invariants:
    - Every operation reads the caller through the identity accessor first;
      no identity (anonymous, loading, expired) raises PermissionDeniedError
      before storage is touched
    - Every query filters by user_id == caller, and runs in an owner-bound
      database session (db/access_policy.py) as a second, independent filter
    - Missing and not-owned records both raise ResourceNotFoundError
    - Input is validated by the schemas in schemas/records.py before any
      database session opens; the first violated field wins
    - user_id and id are never taken from input; created_at is set once;
      updated_at strictly advances on every mutation
    - A task's parent application is always owned by the task's owner
    - delete_application removes the application and its tasks in one transaction
    - Every successful mutation commits before returning

Design Decisions:
    - Returns pydantic records, never ORM objects: callers cannot lazy-load
      or mutate persistence state by accident
    - One database session per call: concurrent calls from one client are
      independent and unordered, callers re-fetch after writes
    - toggle_task_completed goes through update_task so it has no contract of its own
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.domain_types import (
    ApplicationId, ApplicationStatus, TaskId, UserId,
)
from jobtracker.core.errors import ErrorContext, ResourceNotFoundError
from jobtracker.core.repository_protocols import IdentityAccessor
from jobtracker.infrastructure.database import DatabaseSessionManager
from jobtracker.models.application import Application
from jobtracker.models.profile import Profile
from jobtracker.models.task import Task
from jobtracker.schemas.records import (
    ApplicationCreate, ApplicationRecord, ApplicationUpdate,
    DashboardStats, ProfileRecord,
    TaskCreate, TaskListItem, TaskRecord, TaskUpdate,
    parse_record_input,
)

logger = logging.getLogger(__name__)

_TASK_ORDER = (
    Task.due_date.asc().nulls_last(),
    Task.created_at.desc(),
    Task.id,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_uuid(value: uuid.UUID | str, resource_type: str) -> uuid.UUID:
    """Coerce an id; malformed ids are reported exactly like missing ones."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ResourceNotFoundError(resource_type, str(value))


class RecordStore:
    """Typed CRUD over Application and Task, scoped to the current caller."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        identity: IdentityAccessor,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._db = db
        self._identity = identity
        self._clock = clock

    # ─── Applications ────────────────────────────────────────────

    async def list_applications(self) -> list[ApplicationRecord]:
        """Caller's applications, newest first."""
        owner = self._identity()
        async with self._db.session(owner) as db:
            result = await db.execute(
                select(Application)
                .where(Application.user_id == owner)
                .order_by(Application.created_at.desc(), Application.id),
            )
            return [
                ApplicationRecord.model_validate(a) for a in result.scalars().all()
            ]

    async def create_application(
        self,
        company: str,
        position: str,
        status: ApplicationStatus | str | None = None,
        notes: str | None = None,
    ) -> ApplicationRecord:
        owner = self._identity()
        fields: dict[str, Any] = {
            "company": company, "position": position, "notes": notes,
        }
        if status is not None:
            fields["status"] = status
        data = parse_record_input(ApplicationCreate, fields)

        now = self._clock()
        application = Application(
            id=uuid.uuid4(),
            user_id=owner,
            company=data.company,
            position=data.position,
            status=data.status.value,
            notes=data.notes,
            created_at=now,
            updated_at=now,
        )
        async with self._db.session(owner) as db:
            db.add(application)
            await db.commit()
        logger.info(
            "Application created",
            extra={"user_id": str(owner), "record_id": str(application.id)},
        )
        return ApplicationRecord.model_validate(application)

    async def get_application(
        self, application_id: ApplicationId | str,
    ) -> ApplicationRecord:
        owner = self._identity()
        app_id = _as_uuid(application_id, "Application")
        async with self._db.session(owner) as db:
            application = await self._load_application(db, owner, app_id)
            return ApplicationRecord.model_validate(application)

    async def update_application(
        self, application_id: ApplicationId | str, fields: Mapping[str, Any],
    ) -> ApplicationRecord:
        """Apply a partial update; unchanged fields keep their values."""
        owner = self._identity()
        app_id = _as_uuid(application_id, "Application")
        changes = parse_record_input(ApplicationUpdate, fields).model_dump(
            exclude_unset=True,
        )

        async with self._db.session(owner) as db:
            application = await self._load_application(db, owner, app_id)
            if not changes:
                return ApplicationRecord.model_validate(application)
            for name, value in changes.items():
                if isinstance(value, ApplicationStatus):
                    value = value.value
                setattr(application, name, value)
            application.updated_at = self._next_timestamp(application.updated_at)
            await db.commit()
            logger.info(
                f"Application updated: {sorted(changes)}",
                extra={"user_id": str(owner), "record_id": str(app_id)},
            )
            return ApplicationRecord.model_validate(application)

    async def delete_application(self, application_id: ApplicationId | str) -> None:
        """Delete an application and every task under it, atomically."""
        owner = self._identity()
        app_id = _as_uuid(application_id, "Application")
        async with self._db.session(owner) as db:
            application = await self._load_application(db, owner, app_id)
            result = await db.execute(
                delete(Task)
                .where(Task.application_id == app_id, Task.user_id == owner)
                .execution_options(synchronize_session=False),
            )
            await db.delete(application)
            await db.commit()
        logger.info(
            f"Application deleted with {result.rowcount} task(s)",
            extra={"user_id": str(owner), "record_id": str(app_id)},
        )

    # ─── Tasks ───────────────────────────────────────────────────

    async def list_tasks(self) -> list[TaskListItem]:
        """Caller's tasks with parent summary: due date ascending (undated last), newest first."""
        owner = self._identity()
        async with self._db.session(owner) as db:
            result = await db.execute(
                select(Task, Application.company, Application.position)
                .join(Task.application)
                .where(Task.user_id == owner)
                .order_by(*_TASK_ORDER),
            )
            return [
                TaskListItem(
                    **TaskRecord.model_validate(task).model_dump(),
                    application_company=company,
                    application_position=position,
                )
                for task, company, position in result.all()
            ]

    async def list_application_tasks(
        self, application_id: ApplicationId | str,
    ) -> list[TaskRecord]:
        """Tasks of one caller-owned application, same order as list_tasks."""
        owner = self._identity()
        app_id = _as_uuid(application_id, "Application")
        async with self._db.session(owner) as db:
            await self._load_application(db, owner, app_id)
            result = await db.execute(
                select(Task)
                .where(Task.application_id == app_id, Task.user_id == owner)
                .order_by(*_TASK_ORDER),
            )
            return [TaskRecord.model_validate(t) for t in result.scalars().all()]

    async def create_task(
        self,
        application_id: ApplicationId | str,
        title: str,
        due_date: date | str | None = None,
        notes: str | None = None,
    ) -> TaskRecord:
        owner = self._identity()
        data = parse_record_input(TaskCreate, {
            "application_id": _as_uuid(application_id, "Application"),
            "title": title,
            "due_date": due_date,
            "notes": notes,
        })

        now = self._clock()
        async with self._db.session(owner) as db:
            await self._load_application(db, owner, data.application_id)
            task = Task(
                id=uuid.uuid4(),
                user_id=owner,
                application_id=data.application_id,
                title=data.title,
                due_date=data.due_date,
                completed=False,
                notes=data.notes,
                created_at=now,
                updated_at=now,
            )
            db.add(task)
            await db.commit()
        logger.info(
            "Task created",
            extra={"user_id": str(owner), "record_id": str(task.id)},
        )
        return TaskRecord.model_validate(task)

    async def get_task(self, task_id: TaskId | str) -> TaskRecord:
        owner = self._identity()
        tid = _as_uuid(task_id, "Task")
        async with self._db.session(owner) as db:
            task = await self._load_task(db, owner, tid)
            return TaskRecord.model_validate(task)

    async def update_task(
        self, task_id: TaskId | str, fields: Mapping[str, Any],
    ) -> TaskRecord:
        """Apply a partial update; a new parent application must be caller-owned."""
        owner = self._identity()
        tid = _as_uuid(task_id, "Task")
        changes = parse_record_input(TaskUpdate, fields).model_dump(
            exclude_unset=True,
        )

        async with self._db.session(owner) as db:
            task = await self._load_task(db, owner, tid)
            if not changes:
                return TaskRecord.model_validate(task)
            new_parent = changes.get("application_id")
            if new_parent is not None and new_parent != task.application_id:
                await self._load_application(db, owner, new_parent)
            for name, value in changes.items():
                setattr(task, name, value)
            task.updated_at = self._next_timestamp(task.updated_at)
            await db.commit()
            logger.info(
                f"Task updated: {sorted(changes)}",
                extra={"user_id": str(owner), "record_id": str(tid)},
            )
            return TaskRecord.model_validate(task)

    async def delete_task(self, task_id: TaskId | str) -> None:
        owner = self._identity()
        tid = _as_uuid(task_id, "Task")
        async with self._db.session(owner) as db:
            task = await self._load_task(db, owner, tid)
            await db.delete(task)
            await db.commit()
        logger.info(
            "Task deleted", extra={"user_id": str(owner), "record_id": str(tid)},
        )

    async def toggle_task_completed(self, task_id: TaskId | str) -> TaskRecord:
        """Flip completed. Thin wrapper over update_task."""
        task = await self.get_task(task_id)
        return await self.update_task(task.id, {"completed": not task.completed})

    # ─── Dashboard & profile ─────────────────────────────────────

    async def get_dashboard_stats(self) -> DashboardStats:
        owner = self._identity()
        async with self._db.session(owner) as db:
            total_applications = await self._count(
                db, Application, Application.user_id == owner,
            )
            interview_stage = await self._count(
                db, Application,
                Application.user_id == owner,
                Application.status == ApplicationStatus.INTERVIEW.value,
            )
            total_tasks = await self._count(db, Task, Task.user_id == owner)
            pending_tasks = await self._count(
                db, Task, Task.user_id == owner, Task.completed.is_(False),
            )
        return DashboardStats(
            total_applications=total_applications,
            total_tasks=total_tasks,
            pending_tasks=pending_tasks,
            interview_stage=interview_stage,
        )

    async def get_profile(self) -> ProfileRecord:
        owner = self._identity()
        async with self._db.session(owner) as db:
            result = await db.execute(select(Profile).where(Profile.id == owner))
            profile = result.scalar_one_or_none()
            if profile is None:
                raise ResourceNotFoundError("Profile", str(owner))
            return ProfileRecord.model_validate(profile)

    # ─── Helpers ─────────────────────────────────────────────────

    async def _load_application(
        self, db: AsyncSession, owner: UserId, app_id: uuid.UUID,
    ) -> Application:
        result = await db.execute(
            select(Application).where(
                Application.id == app_id, Application.user_id == owner,
            ),
        )
        application = result.scalar_one_or_none()
        if application is None:
            raise ResourceNotFoundError(
                "Application", str(app_id),
                ErrorContext(user_id=str(owner), record_id=str(app_id)),
            )
        return application

    async def _load_task(
        self, db: AsyncSession, owner: UserId, task_id: uuid.UUID,
    ) -> Task:
        result = await db.execute(
            select(Task).where(Task.id == task_id, Task.user_id == owner),
        )
        task = result.scalar_one_or_none()
        if task is None:
            raise ResourceNotFoundError(
                "Task", str(task_id),
                ErrorContext(user_id=str(owner), record_id=str(task_id)),
            )
        return task

    @staticmethod
    async def _count(db: AsyncSession, entity, *criteria) -> int:
        result = await db.execute(
            select(func.count()).select_from(entity).where(*criteria),
        )
        return result.scalar_one()

    def _next_timestamp(self, previous: datetime) -> datetime:
        now = self._clock()
        if now <= previous:
            return previous + timedelta(microseconds=1)
        return now
