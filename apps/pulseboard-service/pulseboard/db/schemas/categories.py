from datetime import datetime
from typing import Optional

from .common import CamelModel, HexColor, OrmCamelModel, text_field

DEFAULT_CATEGORY_COLOR = "#E6E6FA"

CategoryName = text_field("name", max_length=100)


class TaskCategoryBase(CamelModel):
    name: CategoryName
    color: HexColor = DEFAULT_CATEGORY_COLOR


class TaskCategoryCreate(TaskCategoryBase):
    pass


class TaskCategoryUpdate(CamelModel):
    name: Optional[CategoryName] = None
    color: Optional[HexColor] = None


class TaskCategory(OrmCamelModel):
    id: int
    name: str
    color: Optional[str] = None
    task_count: int = 0
    avg_points: float = 0.0
    created_at: datetime
    updated_at: datetime
