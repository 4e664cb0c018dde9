"""
Task category repository functions.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from pulseboard.db import models, schemas

logger = logging.getLogger(__name__)


def get_category(db: Session, category_id: int):
    return db.query(models.TaskCategory).filter(models.TaskCategory.id == category_id).first()


def get_category_by_name(db: Session, name: str, *, exclude_id: Optional[int] = None):
    q = db.query(models.TaskCategory).filter(
        func.lower(models.TaskCategory.name) == name.strip().lower()
    )
    if exclude_id is not None:
        q = q.filter(models.TaskCategory.id != exclude_id)
    return q.first()


def get_categories(db: Session, *, search: Optional[str] = None, skip: int = 0, limit: int = 100):
    q = db.query(models.TaskCategory)
    if search:
        q = q.filter(func.lower(models.TaskCategory.name).like(f"%{search.strip().lower()}%"))
    return q.order_by(models.TaskCategory.name.asc()).offset(skip).limit(limit).all()


def get_all_categories(db: Session):
    return db.query(models.TaskCategory).order_by(models.TaskCategory.id.asc()).all()


def create_category(db: Session, category: schemas.TaskCategoryCreate):
    db_category = models.TaskCategory(
        name=category.name,
        color=category.color or schemas.DEFAULT_CATEGORY_COLOR,
        task_count=0,
    )
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


def update_category(db: Session, db_category, category: schemas.TaskCategoryUpdate):
    for key, value in category.model_dump(exclude_unset=True).items():
        if key in ("name", "color") and value is None:
            continue
        setattr(db_category, key, value)
    db.commit()
    db.refresh(db_category)
    return db_category


def delete_category(db: Session, category_id: int) -> bool:
    """Delete a category; its tasks are kept and become uncategorized."""
    try:
        db_category = get_category(db, category_id)
        if not db_category:
            return False
        db.query(models.Task).filter(models.Task.category_id == category_id).update(
            {models.Task.category_id: None}, synchronize_session=False
        )
        db.delete(db_category)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.error("Error deleting category %s: %s", category_id, e)
        raise RuntimeError(f"Failed to delete category: {e}") from e


def get_category_task_stats(db: Session) -> Dict[int, Tuple[int, float]]:
    """Return ``{category_id: (task_count, avg_points)}`` computed from tasks."""
    rows = (
        db.query(
            models.Task.category_id,
            func.count(models.Task.id),
            func.avg(models.Task.points),
        )
        .filter(models.Task.category_id.isnot(None))
        .group_by(models.Task.category_id)
        .all()
    )
    return {cid: (int(count), round(float(avg or 0), 1)) for cid, count, avg in rows}


def with_task_stats(db_category, stats: Dict[int, Tuple[int, float]]) -> schemas.TaskCategory:
    count, avg = stats.get(db_category.id, (0, 0.0))
    return schemas.TaskCategory.model_validate(db_category).model_copy(
        update={"task_count": count, "avg_points": avg}
    )


def refresh_task_counts(db: Session, category_ids: Iterable[Optional[int]]) -> None:
    """Rewrite the stored ``task_count`` of the given categories."""
    ids = {cid for cid in category_ids if cid is not None}
    for cid in ids:
        count = db.query(func.count(models.Task.id)).filter(models.Task.category_id == cid).scalar() or 0
        db.query(models.TaskCategory).filter(models.TaskCategory.id == cid).update(
            # updated_at unchanged: count refreshes are not category edits
            {models.TaskCategory.task_count: count, models.TaskCategory.updated_at: models.TaskCategory.updated_at},
            synchronize_session=False,
        )
    if ids:
        db.commit()
