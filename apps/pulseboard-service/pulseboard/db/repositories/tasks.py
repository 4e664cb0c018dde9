"""
Task repository functions.

Implements filtered listing, CRUD, the status advance transition and the
enrichment that resolves category names/colors and assignee names.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from pulseboard.db import models, schemas
from pulseboard.db.repositories import categories as category_repo
from pulseboard.db.repositories import users as user_repo
from pulseboard.utils.assignees import parse_assignee_ids
from pulseboard.utils.dates import range_cutoff

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "createdAt": models.Task.created_at,
    "updatedAt": models.Task.updated_at,
    "dueDate": models.Task.due_date,
    "points": models.Task.points,
    "title": models.Task.title,
}
DEFAULT_SORT = "-createdAt"

# todo -> in-progress -> completed
NEXT_STATUS = {
    "todo": "in-progress",
    "in-progress": "completed",
}


class InvalidTransition(ValueError):
    pass


def get_task(db: Session, task_id: int):
    return db.query(models.Task).filter(models.Task.id == task_id).first()


def _order_by(sort: Optional[str]):
    key = (sort or DEFAULT_SORT).strip()
    descending = key.startswith("-")
    column = SORT_FIELDS.get(key.lstrip("-"))
    if column is None:
        raise ValueError(f"Unsupported sort field: {key.lstrip('-')}")
    if descending:
        return [column.desc(), models.Task.id.desc()]
    return [column.asc(), models.Task.id.asc()]


def get_tasks(
    db: Session,
    *,
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category_id: Optional[int] = None,
    category: Optional[str] = None,
    range_key: Optional[str] = None,
    sort: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
):
    q = db.query(models.Task)
    if search:
        pattern = f"%{search.strip().lower()}%"
        q = q.filter(
            or_(
                func.lower(models.Task.title).like(pattern),
                func.lower(func.coalesce(models.Task.description, "")).like(pattern),
            )
        )
    if status:
        q = q.filter(models.Task.status == status)
    if priority:
        q = q.filter(models.Task.priority == priority)
    if category_id is not None:
        q = q.filter(models.Task.category_id == category_id)
    if category:
        q = q.join(models.TaskCategory, models.Task.category_id == models.TaskCategory.id).filter(
            func.lower(models.TaskCategory.name) == category.strip().lower()
        )
    cutoff = range_cutoff(range_key)
    if cutoff is not None:
        q = q.filter(
            or_(
                models.Task.created_at >= cutoff,
                and_(models.Task.created_at.is_(None), models.Task.due_date >= cutoff),
            )
        )
    return q.order_by(*_order_by(sort)).offset(skip).limit(limit).all()


def get_all_tasks(db: Session):
    return db.query(models.Task).order_by(models.Task.id.asc()).all()


def _check_category(db: Session, category_id: Optional[int]) -> None:
    if category_id is not None and category_repo.get_category(db, category_id) is None:
        raise LookupError(f"Category {category_id} not found")


def create_task(db: Session, task: schemas.TaskCreate):
    _check_category(db, task.category_id)
    db_task = models.Task(**task.model_dump())
    db.add(db_task)
    db.commit()
    db.refresh(db_task)
    category_repo.refresh_task_counts(db, [db_task.category_id])
    return db_task


def update_task(db: Session, db_task, task: schemas.TaskUpdate):
    changes = task.model_dump(exclude_unset=True)
    if "category_id" in changes:
        _check_category(db, changes["category_id"])
    previous_category = db_task.category_id
    for key, value in changes.items():
        if key in ("title", "status", "priority", "points") and value is None:
            continue
        setattr(db_task, key, value)
    db.commit()
    db.refresh(db_task)
    category_repo.refresh_task_counts(db, [previous_category, db_task.category_id])
    return db_task


def advance_task(db: Session, db_task):
    """Move a task one step along todo -> in-progress -> completed."""
    next_status = NEXT_STATUS.get(db_task.status)
    if next_status is None:
        raise InvalidTransition(f"Cannot advance a task with status '{db_task.status}'")
    db_task.status = next_status
    db.commit()
    db.refresh(db_task)
    return db_task


def delete_task(db: Session, task_id: int) -> bool:
    try:
        db_task = get_task(db, task_id)
        if not db_task:
            return False
        category_id = db_task.category_id
        db.delete(db_task)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Error deleting task %s: %s", task_id, e)
        raise RuntimeError(f"Failed to delete task: {e}") from e
    category_repo.refresh_task_counts(db, [category_id])
    return True


def get_task_stats(db: Session) -> dict:
    counts = dict(
        db.query(models.Task.status, func.count(models.Task.id)).group_by(models.Task.status).all()
    )
    return {
        "total": sum(counts.values()),
        "todo": counts.get("todo", 0),
        "in_progress": counts.get("in-progress", 0),
        "completed": counts.get("completed", 0),
        "cancelled": counts.get("cancelled", 0),
    }


def enrich_tasks(db: Session, tasks) -> List[schemas.Task]:
    """Attach category name/color and resolved assignees to each task.

    Assignee ids that no longer resolve to a user are left out of
    ``assignees`` but stay in ``assigneeIds``.
    """
    categories: Dict[int, models.TaskCategory] = {c.id: c for c in category_repo.get_all_categories(db)}
    wanted = set()
    for t in tasks:
        wanted.update(parse_assignee_ids(t.assignee_ids))
    users = user_repo.get_users_by_ids(db, wanted)

    enriched = []
    for t in tasks:
        cat = categories.get(t.category_id) if t.category_id is not None else None
        assignees = [
            schemas.Assignee(id=uid, name=users[uid].name)
            for uid in parse_assignee_ids(t.assignee_ids)
            if uid in users
        ]
        # ``Task.category`` is the relationship, so columns are copied explicitly
        data = {col.name: getattr(t, col.name) for col in models.Task.__table__.columns}
        enriched.append(
            schemas.Task(
                **data,
                category=cat.name if cat else None,
                category_color=cat.color if cat else None,
                assignees=assignees,
            )
        )
    return enriched
