from datetime import datetime
from typing import List, Optional

from pydantic import Field

from pulseboard.db.models import TASK_PRIORITIES, TASK_STATUSES
from .common import AssigneeIds, CamelModel, OrmCamelModel, choice_field, text_field

TaskTitle = text_field("title")
TaskStatus = choice_field("status", TASK_STATUSES)
TaskPriority = choice_field("priority", TASK_PRIORITIES)


class TaskBase(CamelModel):
    title: TaskTitle
    description: Optional[str] = None
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    category_id: Optional[int] = None
    points: int = Field(default=0, ge=0)
    assignee_ids: AssigneeIds = None
    due_date: Optional[datetime] = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(CamelModel):
    title: Optional[TaskTitle] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category_id: Optional[int] = None
    points: Optional[int] = Field(default=None, ge=0)
    assignee_ids: AssigneeIds = None
    due_date: Optional[datetime] = None


class Assignee(CamelModel):
    id: int
    name: str


class Task(OrmCamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    category_id: Optional[int] = None
    points: int = 0
    assignee_ids: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    # Enrichment resolved from categories/users
    category: Optional[str] = None
    category_color: Optional[str] = None
    assignees: List[Assignee] = []


class TaskStats(CamelModel):
    total: int
    todo: int
    in_progress: int
    completed: int
    cancelled: int
