"""Record Schemas — declarative field constraints for applications and tasks.

Invariants:
    - company, position: trimmed, 1-100 chars
    - task title: trimmed, 1-200 chars
    - notes: optional, max 1000 chars; blank notes stored as NULL
    - status must be an ApplicationStatus value
    - due_date is a calendar date; datetimes with a time component are rejected
    - Unknown fields (id, user_id, created_at, ...) are rejected: owner and id are immutable
    - Update schemas accept partial input; explicitly nulling a required field is an error
    - parse_record_input reports only the FIRST violated field

Design Decisions:
    - One schema per mutating call shape: create and update share the same
      field checks, so validation is identical on both paths
    - PydanticCustomError over ValueError: messages surface verbatim, without
      pydantic's "Value error," prefix
    - Record (response) models built with from_attributes: the record store
      never hands ORM objects to callers
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, TypeVar
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, Field, ValidationError, field_validator,
)
from pydantic_core import PydanticCustomError

from jobtracker.core.domain_types import (
    ApplicationStatus,
    COMPANY_MAX_LENGTH, POSITION_MAX_LENGTH, TITLE_MAX_LENGTH, NOTES_MAX_LENGTH,
)
from jobtracker.core.errors import FieldValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _required_text(value: str | None, label: str, max_length: int) -> str:
    if value is None:
        raise PydanticCustomError("missing", f"{label} is required")
    value = value.strip()
    if not value:
        raise PydanticCustomError("missing", f"{label} is required")
    if len(value) > max_length:
        raise PydanticCustomError(
            "too_long", f"{label} must be at most {max_length} characters",
        )
    return value


def _optional_notes(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    if len(value) > NOTES_MAX_LENGTH:
        raise PydanticCustomError(
            "too_long", f"Notes must be at most {NOTES_MAX_LENGTH} characters",
        )
    return value


def _plain_date(value: Any) -> Any:
    if isinstance(value, datetime):
        raise PydanticCustomError("date_only", "Due date must not include a time")
    return value


# --- Application -------------------------------------------------------------

class ApplicationCreate(BaseModel):
    """Fields accepted by Create-Application."""
    model_config = ConfigDict(extra="forbid")

    company: str
    position: str
    status: ApplicationStatus = ApplicationStatus.APPLIED
    notes: str | None = None

    @field_validator("company")
    @classmethod
    def check_company(cls, v: str) -> str:
        return _required_text(v, "Company name", COMPANY_MAX_LENGTH)

    @field_validator("position")
    @classmethod
    def check_position(cls, v: str) -> str:
        return _required_text(v, "Position", POSITION_MAX_LENGTH)

    @field_validator("notes")
    @classmethod
    def check_notes(cls, v: str | None) -> str | None:
        return _optional_notes(v)


class ApplicationUpdate(BaseModel):
    """Partial fields accepted by Update-Application."""
    model_config = ConfigDict(extra="forbid")

    company: str | None = None
    position: str | None = None
    status: ApplicationStatus | None = None
    notes: str | None = None

    @field_validator("company")
    @classmethod
    def check_company(cls, v: str | None) -> str:
        return _required_text(v, "Company name", COMPANY_MAX_LENGTH)

    @field_validator("position")
    @classmethod
    def check_position(cls, v: str | None) -> str:
        return _required_text(v, "Position", POSITION_MAX_LENGTH)

    @field_validator("status")
    @classmethod
    def check_status(cls, v: ApplicationStatus | None) -> ApplicationStatus:
        if v is None:
            raise PydanticCustomError("missing", "Status is required")
        return v

    @field_validator("notes")
    @classmethod
    def check_notes(cls, v: str | None) -> str | None:
        return _optional_notes(v)


# --- Task --------------------------------------------------------------------

class TaskCreate(BaseModel):
    """Fields accepted by Create-Task."""
    model_config = ConfigDict(extra="forbid")

    application_id: UUID
    title: str
    due_date: date | None = None
    notes: str | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return _required_text(v, "Title", TITLE_MAX_LENGTH)

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, v: Any) -> Any:
        return _plain_date(v)

    @field_validator("notes")
    @classmethod
    def check_notes(cls, v: str | None) -> str | None:
        return _optional_notes(v)


class TaskUpdate(BaseModel):
    """Partial fields accepted by Update-Task (including parent reassignment)."""
    model_config = ConfigDict(extra="forbid")

    application_id: UUID | None = None
    title: str | None = None
    due_date: date | None = None
    completed: bool | None = None
    notes: str | None = None

    @field_validator("application_id")
    @classmethod
    def check_application_id(cls, v: UUID | None) -> UUID:
        if v is None:
            raise PydanticCustomError("missing", "Please select an application")
        return v

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str:
        return _required_text(v, "Title", TITLE_MAX_LENGTH)

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, v: Any) -> Any:
        return _plain_date(v)

    @field_validator("completed")
    @classmethod
    def check_completed(cls, v: bool | None) -> bool:
        if v is None:
            raise PydanticCustomError("missing", "Completed must be true or false")
        return v

    @field_validator("notes")
    @classmethod
    def check_notes(cls, v: str | None) -> str | None:
        return _optional_notes(v)


def parse_record_input(schema: type[SchemaT], data: Mapping[str, Any]) -> SchemaT:
    """Validate input against a schema; raise FieldValidationError for the first violation."""
    try:
        return schema.model_validate(dict(data))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or "__root__"
        raise FieldValidationError(first["msg"], field) from None


# --- Records (read side) -----------------------------------------------------

class ApplicationRecord(BaseModel):
    """Application as returned to callers."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    company: str
    position: str
    status: ApplicationStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class TaskRecord(BaseModel):
    """Task as returned to callers."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    application_id: UUID
    title: str
    due_date: date | None = None
    completed: bool = False
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class TaskListItem(TaskRecord):
    """Task joined with its parent application's summary."""
    application_company: str
    application_position: str


class DashboardStats(BaseModel):
    """Counters shown on the dashboard."""
    total_applications: int = Field(ge=0)
    total_tasks: int = Field(ge=0)
    pending_tasks: int = Field(ge=0)
    interview_stage: int = Field(ge=0)


class ProfileRecord(BaseModel):
    """Caller's profile."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None = None
    created_at: datetime
