"""
Recent activity feed for the dashboard.

Mixes the latest task, user and category changes into one list ordered by
the underlying timestamp, newest first.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from pulseboard.db import models
from pulseboard.db.models import as_utc, now_utc
from pulseboard.utils.assignees import parse_assignee_ids
from pulseboard.utils.dates import time_ago

DEFAULT_ACTIVITY_LIMIT = 8
RECENT_TASKS = 4
RECENT_USERS = 2
RECENT_CATEGORIES = 2


def _latest(db: Session, model, count: int):
    return db.query(model).order_by(model.updated_at.desc(), model.id.desc()).limit(count).all()


def build_activity(tasks, users, categories, *, user_names: dict, limit: int = DEFAULT_ACTIVITY_LIMIT,
                   now: Optional[datetime] = None) -> List[dict]:
    now = now or now_utc()
    items = []
    for t in tasks:
        actor = "System"
        ids = parse_assignee_ids(t.assignee_ids)
        if ids:
            actor = user_names.get(ids[0], "Unknown User")
        done = t.status == "completed"
        items.append(
            {
                "id": f"task-{t.id}",
                "type": "completed" if done else "created",
                "user": actor,
                "action": "completed task" if done else "updated task",
                "task": t.title,
                "timestamp": as_utc(t.updated_at),
            }
        )
    for u in users:
        items.append(
            {
                "id": f"user-{u.id}",
                "type": "user",
                "user": u.name,
                "action": "joined the team",
                "task": "",
                "timestamp": as_utc(u.updated_at),
            }
        )
    for c in categories:
        items.append(
            {
                "id": f"category-{c.id}",
                "type": "created",
                "user": "System",
                "action": "updated category",
                "task": c.name,
                "timestamp": as_utc(c.updated_at),
            }
        )
    items.sort(key=lambda item: item["timestamp"] or now, reverse=True)
    items = items[:limit]
    for item in items:
        item["time"] = time_ago(item["timestamp"], now)
    return items


def get_recent_activity(db: Session, limit: int = DEFAULT_ACTIVITY_LIMIT) -> List[dict]:
    tasks = _latest(db, models.Task, RECENT_TASKS)
    users = _latest(db, models.User, RECENT_USERS)
    categories = _latest(db, models.TaskCategory, RECENT_CATEGORIES)
    wanted = {ids[0] for ids in (parse_assignee_ids(t.assignee_ids) for t in tasks) if ids}
    names = dict(db.query(models.User.id, models.User.name).filter(models.User.id.in_(wanted)).all()) if wanted else {}
    return build_activity(tasks, users, categories, user_names=names, limit=limit)
