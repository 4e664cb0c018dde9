"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc` and all ORM classes from one import point.
"""

from .base import Base, now_utc, as_utc  # re-export

# Domain models
from .users import User, USER_ROLES, USER_STATUSES
from .categories import TaskCategory
from .tasks import Task, TASK_STATUSES, TASK_PRIORITIES
from .auth import AuthUser, AuthSession, AuthAccount, AuthVerification

__all__ = [
    # base
    "Base",
    "now_utc",
    "as_utc",
    # master tables
    "User",
    "USER_ROLES",
    "USER_STATUSES",
    "TaskCategory",
    "Task",
    "TASK_STATUSES",
    "TASK_PRIORITIES",
    # auth tables
    "AuthUser",
    "AuthSession",
    "AuthAccount",
    "AuthVerification",
]
