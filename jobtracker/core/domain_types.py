"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ApplicationId, TaskId wrap UUIDs — never use bare UUID in domain logic
    - ApplicationStatus is the fixed status enum (applied | interview | offer | rejected)
    - AuthState encodes the three session lifecycle states

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ApplicationId = NewType("ApplicationId", UUID)
TaskId = NewType("TaskId", UUID)
AuthSessionId = NewType("AuthSessionId", UUID)


# ─── Field Limits ────────────────────────────────────────────────

COMPANY_MAX_LENGTH = 100
POSITION_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 200
NOTES_MAX_LENGTH = 1000
EMAIL_MAX_LENGTH = 255


# ─── Enums ───────────────────────────────────────────────────────

class ApplicationStatus(str, Enum):
    """Where an application stands in the hiring pipeline."""
    APPLIED = "applied"
    INTERVIEW = "interview"
    OFFER = "offer"
    REJECTED = "rejected"


class AuthState(str, Enum):
    """Session lifecycle states."""
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
