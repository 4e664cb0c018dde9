"""
Task category API endpoints.

Category listings carry per-request task counts and average points.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pulseboard.api.deps import require_admin
from pulseboard.db import schemas
from pulseboard.db.database import get_db
from pulseboard.db.repositories import categories as category_repo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/task-categories", tags=["task-categories"])


@router.get("", response_model=List[schemas.TaskCategory])
def list_categories(
    search: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    stats = category_repo.get_category_task_stats(db)
    categories = category_repo.get_categories(db, search=search, skip=offset, limit=limit)
    return [category_repo.with_task_stats(c, stats) for c in categories]


@router.get("/{category_id}", response_model=schemas.TaskCategory)
def get_category(category_id: int, db: Session = Depends(get_db)):
    db_category = category_repo.get_category(db, category_id)
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category_repo.with_task_stats(db_category, category_repo.get_category_task_stats(db))


@router.post("", response_model=schemas.TaskCategory, status_code=status.HTTP_201_CREATED)
def create_category(
    category: schemas.TaskCategoryCreate,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    if category_repo.get_category_by_name(db, category.name):
        raise HTTPException(status_code=400, detail="Category name already exists")
    created = category_repo.create_category(db, category)
    logger.info("category_created: category_id=%s", created.id)
    return category_repo.with_task_stats(created, {})


@router.put("/{category_id}", response_model=schemas.TaskCategory)
def update_category(
    category_id: int,
    category: schemas.TaskCategoryUpdate,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    db_category = category_repo.get_category(db, category_id)
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")
    if category.name and category_repo.get_category_by_name(db, category.name, exclude_id=category_id):
        raise HTTPException(status_code=400, detail="Category name already exists")
    updated = category_repo.update_category(db, db_category, category)
    return category_repo.with_task_stats(updated, category_repo.get_category_task_stats(db))


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    try:
        ok = category_repo.delete_category(db, category_id)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not ok:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"message": "Category deleted successfully", "id": category_id}
