"""
Dashboard metrics and report analytics.

Every figure is an aggregation over rows already loaded from the database;
the ``compute_*`` helpers are pure and take ORM rows (or any objects with
the same attributes), the ``get_*`` helpers load the rows first.

Performance metric definitions (all integer percentages unless noted):

- ``taskCompletion``: completed tasks / all tasks
- ``onTimeDelivery``: completed tasks with a due date whose last update is
  not after that due date / completed tasks with a due date
- ``qualityScore``: completed / (completed + cancelled)
- ``collaboration``: tasks with more than one assignee / all tasks
- ``pointsAverage``: mean points per task (one decimal)
- ``efficiency``: points of completed tasks / all points
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from pulseboard.db.models import TASK_PRIORITIES, TASK_STATUSES, as_utc, now_utc
from pulseboard.db.repositories import categories as category_repo
from pulseboard.db.repositories import tasks as task_repo
from pulseboard.db.repositories import users as user_repo
from pulseboard.utils.assignees import parse_assignee_ids
from pulseboard.utils.dates import range_cutoff, trend_days

logger = logging.getLogger(__name__)

TOP_ASSIGNEES_LIMIT = 5
UNCATEGORIZED = "Uncategorized"


def _percent(part: float, whole: float) -> int:
    if not whole:
        return 0
    return int(round(part / whole * 100))


def compute_dashboard_metrics(tasks, users) -> dict:
    total = len(tasks)
    completed = [t for t in tasks if t.status == "completed"]
    active = sum(1 for t in tasks if t.status in ("todo", "in-progress"))

    durations = []
    for t in completed:
        created, updated = as_utc(t.created_at), as_utc(t.updated_at)
        if created and updated:
            durations.append(max((updated - created).total_seconds(), 0) / 3600)
    avg_time = f"{sum(durations) / len(durations):.1f}h" if durations else "0h"

    return {
        "total_tasks": total,
        "active_tasks": active,
        "completed_tasks": len(completed),
        "completion_rate": _percent(len(completed), total),
        "total_points": sum(t.points or 0 for t in tasks),
        "active_users": sum(1 for u in users if u.status == "active"),
        "avg_time_per_task": avg_time,
    }


def compute_top_assignees(tasks, users, limit: int = TOP_ASSIGNEES_LIMIT) -> List[dict]:
    """Rank users by points of completed tasks; each assignee gets the full points."""
    names = {u.id: u.name for u in users}
    points: Dict[int, int] = defaultdict(int)
    counts: Dict[int, int] = defaultdict(int)
    for t in tasks:
        if t.status != "completed":
            continue
        for uid in parse_assignee_ids(t.assignee_ids):
            if uid not in names:
                continue
            points[uid] += t.points or 0
            counts[uid] += 1
    ranked = sorted(points, key=lambda uid: (-points[uid], -counts[uid], uid))
    return [
        {"id": uid, "name": names[uid], "points": points[uid], "task_count": counts[uid]}
        for uid in ranked[:limit]
    ]


def compute_tasks_by_category(tasks, categories) -> List[dict]:
    counts: Dict[Optional[int], int] = defaultdict(int)
    for t in tasks:
        counts[t.category_id] += 1
    known = {c.id for c in categories}
    rows = [
        {"category_id": c.id, "category": c.name, "color": c.color, "count": counts.get(c.id, 0)}
        for c in categories
    ]
    orphaned = sum(n for cid, n in counts.items() if cid not in known)
    if orphaned:
        rows.append({"category_id": None, "category": UNCATEGORIZED, "color": None, "count": orphaned})
    return rows


def compute_tasks_by_status(tasks) -> List[dict]:
    counts = {s: 0 for s in TASK_STATUSES}
    for t in tasks:
        if t.status in counts:
            counts[t.status] += 1
    return [{"status": s, "count": n} for s, n in counts.items()]


def compute_productivity_trend(tasks, range_key: Optional[str], now: Optional[datetime] = None) -> dict:
    """Daily buckets of tasks completed (by last update) ending today."""
    now = now or now_utc()
    days = trend_days(range_key)
    start = now.date() - timedelta(days=days - 1)
    buckets = [start + timedelta(days=i) for i in range(days)]
    points = {d: 0 for d in buckets}
    counts = {d: 0 for d in buckets}
    for t in tasks:
        if t.status != "completed" or t.updated_at is None:
            continue
        day = as_utc(t.updated_at).date()
        if day in points:
            points[day] += t.points or 0
            counts[day] += 1
    return {
        "labels": [d.strftime("%a %m/%d") for d in buckets],
        "total_points_completed": [points[d] for d in buckets],
        "avg_points_per_task": [round(points[d] / counts[d], 1) if counts[d] else 0.0 for d in buckets],
        "tasks_completed": [counts[d] for d in buckets],
    }


def compute_category_breakdown(tasks, categories) -> List[dict]:
    rows = []
    for c in categories:
        mine = [t for t in tasks if t.category_id == c.id]
        total_points = sum(t.points or 0 for t in mine)
        done = sum(1 for t in mine if t.status == "completed")
        rows.append(
            {
                "id": c.id,
                "name": c.name,
                "color": c.color,
                "task_count": len(mine),
                "total_points": total_points,
                "avg_points": round(total_points / len(mine), 1) if mine else 0.0,
                "completion_rate": _percent(done, len(mine)),
            }
        )
    return rows


def compute_priority_distribution(tasks) -> dict:
    dist = {p: 0 for p in TASK_PRIORITIES}
    for t in tasks:
        if t.priority in dist:
            dist[t.priority] += 1
    return dist


def compute_performance_metrics(tasks) -> dict:
    total = len(tasks)
    completed = [t for t in tasks if t.status == "completed"]
    cancelled = sum(1 for t in tasks if t.status == "cancelled")

    with_due = [t for t in completed if t.due_date is not None and t.updated_at is not None]
    on_time = sum(1 for t in with_due if as_utc(t.updated_at) <= as_utc(t.due_date))

    total_points = sum(t.points or 0 for t in tasks)
    completed_points = sum(t.points or 0 for t in completed)

    return {
        "task_completion": _percent(len(completed), total),
        "on_time_delivery": _percent(on_time, len(with_due)),
        "quality_score": _percent(len(completed), len(completed) + cancelled),
        "collaboration": _percent(sum(1 for t in tasks if len(parse_assignee_ids(t.assignee_ids)) > 1), total),
        "points_average": round(total_points / total, 1) if total else 0.0,
        "efficiency": _percent(completed_points, total_points),
    }


def _in_range(tasks, range_key: Optional[str], now: Optional[datetime] = None):
    cutoff = range_cutoff(range_key, now)
    if cutoff is None:
        return list(tasks)
    kept = []
    for t in tasks:
        stamp = as_utc(t.created_at) or as_utc(t.due_date)
        if stamp is not None and stamp >= cutoff:
            kept.append(t)
    return kept


def get_dashboard_metrics(db: Session) -> dict:
    return compute_dashboard_metrics(task_repo.get_all_tasks(db), user_repo.get_all_users(db))


def get_dashboard_charts(db: Session) -> dict:
    tasks = task_repo.get_all_tasks(db)
    users = user_repo.get_all_users(db)
    categories = category_repo.get_all_categories(db)
    return {
        "top_assignees": compute_top_assignees(tasks, users),
        "tasks_by_category": compute_tasks_by_category(tasks, categories),
        "tasks_by_status": compute_tasks_by_status(tasks),
    }


def get_analytics(db: Session, range_key: Optional[str] = "all", now: Optional[datetime] = None) -> dict:
    """Report analytics; breakdowns cover tasks created inside the range."""
    range_key = range_key or "all"
    now = now or now_utc()
    all_tasks = task_repo.get_all_tasks(db)
    scoped = _in_range(all_tasks, range_key, now)
    categories = category_repo.get_all_categories(db)
    logger.debug("analytics: range=%s tasks=%d scoped=%d", range_key, len(all_tasks), len(scoped))
    return {
        "range": range_key,
        "productivity_trend": compute_productivity_trend(all_tasks, range_key, now),
        "category_breakdown": compute_category_breakdown(scoped, categories),
        "priority_distribution": compute_priority_distribution(scoped),
        "performance_metrics": compute_performance_metrics(scoped),
    }
