"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Application and Task are OwnerScoped; every row carries user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from jobtracker.models.auth_user import AuthUser  # noqa: F401
from jobtracker.models.auth_session import AuthSession  # noqa: F401
from jobtracker.models.profile import Profile  # noqa: F401
from jobtracker.models.application import Application  # noqa: F401
from jobtracker.models.task import Task  # noqa: F401
