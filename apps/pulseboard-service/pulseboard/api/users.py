"""
Users API endpoints.

CRUD over the master user table, role/status statistics and the helpers
that keep master users in step with the auth store.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pulseboard.api.auth import default_user_password
from pulseboard.api.deps import get_current_user_context, require_admin
from pulseboard.db import schemas
from pulseboard.db.database import get_db
from pulseboard.db.repositories import auth as auth_repo
from pulseboard.db.repositories import users as user_repo
from pulseboard.utils.passwords import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[schemas.User])
def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return user_repo.get_users(db, search=search, role=role, status=status, skip=offset, limit=limit)


@router.get("/stats", response_model=schemas.UserStats)
def user_stats(db: Session = Depends(get_db)):
    return user_repo.get_user_stats(db)


@router.post("", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user(
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    if user_repo.get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail="Email already exists")
    created = user_repo.create_user(db, user)
    logger.info("user_created: user_id=%s", created.id)
    return created


@router.post("/sync", response_model=schemas.User)
def sync_user(
    payload: schemas.UserSyncRequest,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    """Idempotently create the master user for a freshly registered identity.

    Non-admin callers can only sync themselves, and the role always comes
    from the auth store; admins may sync any email with the requested role.
    """
    caller, caller_auth = user_context
    is_admin = caller.role == "admin" and caller.status == "active"
    if payload.email != caller_auth.email and not is_admin:
        logger.info("user_sync_denied: user_id=%s target=%s", caller.id, payload.email)
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    user, created = user_repo.upsert_from_auth(
        db,
        email=payload.email,
        name=payload.name,
        role=payload.role if is_admin else caller_auth.role,
        image=payload.image,
    )
    if created:
        logger.info("user_synced: user_id=%s auth_id=%s", user.id, payload.id)
    return user


@router.post("/set-default-password", response_model=schemas.DefaultPasswordResponse)
def set_default_password(
    payload: schemas.DefaultPasswordRequest,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    password = default_user_password()
    auth_user = auth_repo.get_auth_user_by_email(db, payload.email)
    if auth_user is None:
        master = user_repo.get_user_by_email(db, payload.email)
        auth_user = auth_repo.create_auth_user(
            db,
            name=payload.name or (master.name if master else payload.email.split("@")[0]),
            email=payload.email,
            role=payload.role or (master.role if master else "member"),
            commit=False,
        )
    auth_repo.set_credential_password(db, auth_user, hash_password(password), commit=False)
    db.commit()
    logger.info("default_password_set: auth_user_id=%s", auth_user.id)
    return schemas.DefaultPasswordResponse(success=True, default_password=password)


@router.get("/{user_id}", response_model=schemas.User)
def get_user(user_id: int, db: Session = Depends(get_db)):
    db_user = user_repo.get_user(db, user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


@router.put("/{user_id}", response_model=schemas.User)
def update_user(
    user_id: int,
    user: schemas.UserUpdate,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    db_user = user_repo.get_user(db, user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.email and user.email != db_user.email:
        existing = user_repo.get_user_by_email(db, user.email)
        if existing and existing.id != user_id:
            raise HTTPException(status_code=400, detail="Email already exists")
    return user_repo.update_user(db, db_user, user)


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    try:
        ok = user_repo.delete_user(db, user_id)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not ok:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User deleted successfully", "id": user_id}
