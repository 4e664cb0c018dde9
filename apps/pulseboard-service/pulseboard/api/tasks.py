"""
Tasks API endpoints.

Listing supports search, status/priority/category filters, a created-at
range window and sorting; every task in a response is enriched with its
category name/color and resolved assignees.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pulseboard.api.deps import require_task_editor
from pulseboard.db import models, schemas
from pulseboard.db.database import get_db
from pulseboard.db.repositories import tasks as task_repo
from pulseboard.utils.dates import VALID_RANGES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _enriched_one(db: Session, db_task) -> schemas.Task:
    return task_repo.enrich_tasks(db, [db_task])[0]


@router.get("", response_model=List[schemas.Task])
def list_tasks(
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    category: Optional[str] = None,
    range_key: str = Query(default="all", alias="range"),
    sort: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    if status and status not in models.TASK_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of: {', '.join(models.TASK_STATUSES)}")
    if priority and priority not in models.TASK_PRIORITIES:
        raise HTTPException(status_code=400, detail=f"priority must be one of: {', '.join(models.TASK_PRIORITIES)}")
    if range_key not in VALID_RANGES:
        raise HTTPException(status_code=400, detail=f"range must be one of: {', '.join(VALID_RANGES)}")
    try:
        tasks = task_repo.get_tasks(
            db,
            search=search,
            status=status,
            priority=priority,
            category_id=category_id,
            category=category,
            range_key=range_key,
            sort=sort,
            skip=offset,
            limit=limit,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return task_repo.enrich_tasks(db, tasks)


@router.get("/stats", response_model=schemas.TaskStats)
def task_stats(db: Session = Depends(get_db)):
    return task_repo.get_task_stats(db)


@router.get("/{task_id}", response_model=schemas.Task)
def get_task(task_id: int, db: Session = Depends(get_db)):
    db_task = task_repo.get_task(db, task_id)
    if not db_task:
        raise HTTPException(status_code=404, detail="Task not found")
    return _enriched_one(db, db_task)


@router.post("", response_model=schemas.Task, status_code=status.HTTP_201_CREATED)
def create_task(
    task: schemas.TaskCreate,
    db: Session = Depends(get_db),
    _editor=Depends(require_task_editor),
):
    try:
        created = task_repo.create_task(db, task)
    except LookupError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("task_created: task_id=%s category_id=%s", created.id, created.category_id)
    return _enriched_one(db, created)


@router.put("/{task_id}", response_model=schemas.Task)
def update_task(
    task_id: int,
    task: schemas.TaskUpdate,
    db: Session = Depends(get_db),
    _editor=Depends(require_task_editor),
):
    db_task = task_repo.get_task(db, task_id)
    if not db_task:
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        updated = task_repo.update_task(db, db_task, task)
    except LookupError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _enriched_one(db, updated)


@router.post("/{task_id}/advance", response_model=schemas.Task)
def advance_task(
    task_id: int,
    db: Session = Depends(get_db),
    _editor=Depends(require_task_editor),
):
    db_task = task_repo.get_task(db, task_id)
    if not db_task:
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        advanced = task_repo.advance_task(db, db_task)
    except task_repo.InvalidTransition as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("task_advanced: task_id=%s status=%s", advanced.id, advanced.status)
    return _enriched_one(db, advanced)


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    _editor=Depends(require_task_editor),
):
    try:
        ok = task_repo.delete_task(db, task_id)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not ok:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": "Task deleted successfully", "id": task_id}
