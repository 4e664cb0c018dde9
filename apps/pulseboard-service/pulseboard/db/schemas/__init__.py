"""
Domain-split Pydantic schemas with a package-level aggregator.

Routers and repositories import ``pulseboard.db.schemas`` and use the
re-exported names.
"""

from .common import CamelModel, OrmCamelModel
from .users import (
    UserBase,
    UserCreate,
    UserUpdate,
    User,
    UserStats,
    UserSyncRequest,
    DefaultPasswordRequest,
)
from .categories import (
    DEFAULT_CATEGORY_COLOR,
    TaskCategoryBase,
    TaskCategoryCreate,
    TaskCategoryUpdate,
    TaskCategory,
)
from .tasks import (
    TaskBase,
    TaskCreate,
    TaskUpdate,
    Assignee,
    Task,
    TaskStats,
)
from .auth import (
    SignUpRequest,
    SignInRequest,
    AuthUser,
    SignInResponse,
    CurrentUser,
    SyncRoleRequest,
    SyncRoleResponse,
    ResetPasswordRequest,
    ResetPasswordResponse,
    DefaultPasswordResponse,
)
from .dashboard import (
    DashboardMetrics,
    AssigneeRanking,
    CategoryCount,
    StatusCount,
    DashboardCharts,
    ActivityItem,
    ProductivityTrend,
    CategoryBreakdown,
    PriorityDistribution,
    PerformanceMetrics,
    Analytics,
)

__all__ = [
    "CamelModel",
    "OrmCamelModel",
    "UserBase",
    "UserCreate",
    "UserUpdate",
    "User",
    "UserStats",
    "UserSyncRequest",
    "DefaultPasswordRequest",
    "DEFAULT_CATEGORY_COLOR",
    "TaskCategoryBase",
    "TaskCategoryCreate",
    "TaskCategoryUpdate",
    "TaskCategory",
    "TaskBase",
    "TaskCreate",
    "TaskUpdate",
    "Assignee",
    "Task",
    "TaskStats",
    "SignUpRequest",
    "SignInRequest",
    "AuthUser",
    "SignInResponse",
    "CurrentUser",
    "SyncRoleRequest",
    "SyncRoleResponse",
    "ResetPasswordRequest",
    "ResetPasswordResponse",
    "DefaultPasswordResponse",
    "DashboardMetrics",
    "AssigneeRanking",
    "CategoryCount",
    "StatusCount",
    "DashboardCharts",
    "ActivityItem",
    "ProductivityTrend",
    "CategoryBreakdown",
    "PriorityDistribution",
    "PerformanceMetrics",
    "Analytics",
]
