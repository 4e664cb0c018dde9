"""
Response shapes for dashboard widgets and the analytics report.
"""
from datetime import datetime
from typing import List, Optional

from .common import CamelModel


class DashboardMetrics(CamelModel):
    total_tasks: int
    active_tasks: int
    completed_tasks: int
    completion_rate: int
    total_points: int
    active_users: int
    avg_time_per_task: str


class AssigneeRanking(CamelModel):
    id: int
    name: str
    points: int
    task_count: int


class CategoryCount(CamelModel):
    category_id: Optional[int] = None
    category: str
    color: Optional[str] = None
    count: int


class StatusCount(CamelModel):
    status: str
    count: int


class DashboardCharts(CamelModel):
    top_assignees: List[AssigneeRanking]
    tasks_by_category: List[CategoryCount]
    tasks_by_status: List[StatusCount]


class ActivityItem(CamelModel):
    id: str
    type: str
    user: str
    action: str
    task: str = ""
    time: str
    timestamp: datetime


class ProductivityTrend(CamelModel):
    labels: List[str]
    total_points_completed: List[int]
    avg_points_per_task: List[float]
    tasks_completed: List[int]


class CategoryBreakdown(CamelModel):
    id: int
    name: str
    color: Optional[str] = None
    task_count: int
    total_points: int
    avg_points: float
    completion_rate: int


class PriorityDistribution(CamelModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    urgent: int = 0


class PerformanceMetrics(CamelModel):
    task_completion: int
    on_time_delivery: int
    quality_score: int
    collaboration: int
    points_average: float
    efficiency: int


class Analytics(CamelModel):
    range: str
    productivity_trend: ProductivityTrend
    category_breakdown: List[CategoryBreakdown]
    priority_distribution: PriorityDistribution
    performance_metrics: PerformanceMetrics
