"""
User repository functions.

CRUD for the master ``users`` table plus the helpers that keep it loosely in
step with the authentication tables (linked by email only).
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from pulseboard.db import models, schemas
from pulseboard.db.repositories import auth as auth_repo
from pulseboard.utils.assignees import parse_assignee_ids, remove_assignee

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    if not email:
        return None
    return db.query(models.User).filter(func.lower(models.User.email) == email.strip().lower()).first()


def get_users(
    db: Session,
    *,
    search: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
):
    q = db.query(models.User)
    if search:
        pattern = f"%{search.strip().lower()}%"
        q = q.filter(
            or_(
                func.lower(models.User.name).like(pattern),
                func.lower(models.User.email).like(pattern),
                func.lower(func.coalesce(models.User.position, "")).like(pattern),
            )
        )
    if role:
        q = q.filter(models.User.role == role.strip().lower())
    if status:
        q = q.filter(models.User.status == status.strip().lower())
    return q.order_by(models.User.created_at.desc(), models.User.id.desc()).offset(skip).limit(limit).all()


def get_users_by_ids(db: Session, user_ids):
    ids = list({int(i) for i in user_ids})
    if not ids:
        return {}
    rows = db.query(models.User).filter(models.User.id.in_(ids)).all()
    return {u.id: u for u in rows}


def create_user(db: Session, user: schemas.UserCreate):
    data = user.model_dump()
    if data.get("join_date") is None:
        data["join_date"] = models.now_utc()
    db_user = models.User(**data)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, db_user, user: schemas.UserUpdate):
    """Apply a partial update; a role change is copied onto the auth user."""
    changes = user.model_dump(exclude_unset=True)
    previous_role = db_user.role
    for key, value in changes.items():
        if key in ("name", "email", "status", "role") and value is None:
            continue
        setattr(db_user, key, value)
    db.commit()
    db.refresh(db_user)
    if db_user.role != previous_role:
        auth_user = auth_repo.get_auth_user_by_email(db, db_user.email)
        if auth_user is not None:
            auth_repo.update_auth_role(db, auth_user, db_user.role)
            logger.info("user_role_synced: user_id=%s role=%s", db_user.id, db_user.role)
    return db_user


def delete_user(db: Session, user_id: int) -> bool:
    """Delete a user and scrub its id from every task assignment."""
    try:
        db_user = get_user(db, user_id)
        if not db_user:
            return False
        tasks = db.query(models.Task).filter(models.Task.assignee_ids.isnot(None)).all()
        for task in tasks:
            if user_id in parse_assignee_ids(task.assignee_ids):
                task.assignee_ids = remove_assignee(task.assignee_ids, user_id)
        db.delete(db_user)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.error("Error deleting user %s: %s", user_id, e)
        raise RuntimeError(f"Failed to delete user: {e}") from e


def get_user_stats(db: Session) -> dict:
    rows = db.query(models.User.role, models.User.status, func.count(models.User.id)).group_by(
        models.User.role, models.User.status
    ).all()
    stats = {"total": 0, "active": 0, "inactive": 0, "admins": 0, "managers": 0, "members": 0}
    for role, status, count in rows:
        stats["total"] += count
        if status in ("active", "inactive"):
            stats[status] += count
        key = {"admin": "admins", "manager": "managers", "member": "members"}.get(role)
        if key:
            stats[key] += count
    return stats


def upsert_from_auth(
    db: Session,
    *,
    email: str,
    name: Optional[str] = None,
    role: Optional[str] = None,
    image: Optional[str] = None,
):
    """Find the master user for an auth identity, creating it when missing.

    Existing rows keep their role and status; only blank name/avatar fields
    are filled in.
    """
    db_user = get_user_by_email(db, email)
    if db_user is not None:
        changed = False
        if not db_user.name and name:
            db_user.name = name
            changed = True
        if not db_user.avatar_url and image:
            db_user.avatar_url = image
            changed = True
        if changed:
            db.commit()
            db.refresh(db_user)
        return db_user, False

    db_user = models.User(
        name=name or email.split("@")[0],
        email=email.strip().lower(),
        role=role if role in models.USER_ROLES else "member",
        status="active",
        avatar_url=image,
        join_date=models.now_utc(),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("master_user_created: user_id=%s email=%s", db_user.id, db_user.email)
    return db_user, True


def get_all_users(db: Session):
    return db.query(models.User).order_by(models.User.id.asc()).all()
