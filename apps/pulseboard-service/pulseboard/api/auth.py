"""
Authentication endpoints and identity configuration.

A minimal email/password credential store backs the session tables: sign
up, sign in, sign out, current-user resolution, role sync and password
resets. Identities link to the master ``users`` table by email only.
"""
import logging
import os
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from pulseboard.api.deps import get_current_session, get_current_user_context, require_admin, require_feature
from pulseboard.db import models, schemas
from pulseboard.db.database import get_db
from pulseboard.db.repositories import auth as auth_repo
from pulseboard.db.repositories import users as user_repo
from pulseboard.db.schemas.common import EMAIL_RE
from pulseboard.utils.passwords import (
    generate_session_token,
    generate_verification_value,
    hash_password,
    password_policy_error,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

PASSWORD_RESET_TTL = timedelta(hours=24)


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower()


def _normalize_list_env(var_name: str) -> set:
    raw = os.getenv(var_name, "")
    values = set()
    for entry in raw.split(","):
        cleaned = entry.strip().strip('"').strip("'")
        if cleaned:
            values.add(cleaned.lower())
    return values


def _admin_emails() -> set:
    return _normalize_list_env("ADMIN_EMAILS")


def _int_env(var_name: str, default: int) -> int:
    try:
        return int(os.getenv(var_name, str(default)))
    except ValueError:
        logger.warning("invalid_int_env: %s=%r, using %s", var_name, os.getenv(var_name), default)
        return default


def session_ttl(remember_me: bool = False) -> timedelta:
    hours = _int_env("SESSION_TTL_HOURS", 24)
    if remember_me:
        hours *= _int_env("REMEMBER_ME_TTL_MULTIPLIER", 30)
    return timedelta(hours=hours)


def default_user_password() -> str:
    return os.getenv("DEFAULT_USER_PASSWORD", "Welcome123")


@router.post("/sign-up/email", response_model=schemas.AuthUser, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: schemas.SignUpRequest,
    db: Session = Depends(get_db),
    _enabled=Depends(require_feature("registration_enabled")),
):
    name = (payload.name or "").strip()
    email = _normalize_email(payload.email)
    if not name or not email or not payload.password:
        raise HTTPException(status_code=400, detail="Name, email and password are required")
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="Invalid email address")
    policy_error = password_policy_error(payload.password)
    if policy_error:
        raise HTTPException(status_code=400, detail=policy_error)
    if auth_repo.get_auth_user_by_email(db, email):
        raise HTTPException(status_code=400, detail="User already exists")

    role = "admin" if email in _admin_emails() else "member"
    auth_user = auth_repo.create_auth_user(db, name=name, email=email, role=role, commit=False)
    auth_repo.set_credential_password(db, auth_user, hash_password(payload.password), commit=False)
    user_repo.upsert_from_auth(db, email=email, name=name, role=role)
    db.commit()
    db.refresh(auth_user)
    logger.info("user_registered: auth_user_id=%s role=%s", auth_user.id, role)
    return auth_user


@router.post("/sign-in/email", response_model=schemas.SignInResponse)
def sign_in(payload: schemas.SignInRequest, request: Request, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    if not email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    auth_user = auth_repo.get_auth_user_by_email(db, email)
    account = auth_repo.get_credential_account(db, auth_user.id) if auth_user else None
    if account is None or not verify_password(payload.password, account.password):
        logger.info("sign_in_failed: email=%s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    user, _created = user_repo.upsert_from_auth(db, email=email, name=auth_user.name, role=auth_user.role)
    if user.status != "active":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account inactive")

    session = auth_repo.create_session(
        db,
        auth_user,
        token=generate_session_token(),
        expires_at=models.now_utc() + session_ttl(payload.remember_me),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    logger.info("sign_in: auth_user_id=%s remember_me=%s", auth_user.id, payload.remember_me)
    return schemas.SignInResponse(
        token=session.token,
        expires_at=models.as_utc(session.expires_at),
        user=schemas.AuthUser.model_validate(auth_user),
    )


@router.post("/sign-out")
def sign_out(db: Session = Depends(get_db), session=Depends(get_current_session)):
    auth_repo.delete_session(db, session.token)
    return {"success": True}


@router.get("/current-user", response_model=schemas.CurrentUser)
def current_user(user_context=Depends(get_current_user_context)):
    user, _auth_user = user_context
    return schemas.CurrentUser(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        status=user.status,
        avatar_url=user.avatar_url,
        position=user.position,
    )


@router.put("/sync-role", response_model=schemas.SyncRoleResponse)
def sync_role(
    payload: schemas.SyncRoleRequest,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    email = _normalize_email(payload.email)
    role = (payload.role or "").strip().lower()
    if not email or not role:
        raise HTTPException(status_code=400, detail="Email and role are required")
    if role not in models.USER_ROLES:
        raise HTTPException(status_code=400, detail=f"role must be one of: {', '.join(models.USER_ROLES)}")
    auth_user = auth_repo.get_auth_user_by_email(db, email)
    if auth_user is None:
        raise HTTPException(status_code=404, detail="User not found in auth system")
    auth_repo.update_auth_role(db, auth_user, role)
    return schemas.SyncRoleResponse(
        success=True,
        message="Role synced successfully",
        user=schemas.AuthUser.model_validate(auth_user),
    )


@router.post("/reset-password", response_model=schemas.ResetPasswordResponse)
def reset_password(
    payload: schemas.ResetPasswordRequest,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    """Replace a credential password; callers may reset their own, admins anyone's."""
    email = _normalize_email(payload.email)
    if not email or not payload.new_password:
        raise HTTPException(status_code=400, detail="Email and new password are required")
    caller, caller_auth = user_context
    if caller_auth.email != email and not (caller.role == "admin" and caller.status == "active"):
        logger.info("password_reset_denied: user_id=%s target=%s", caller.id, email)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    policy_error = password_policy_error(payload.new_password)
    if policy_error:
        raise HTTPException(status_code=400, detail=policy_error)
    auth_user = auth_repo.get_auth_user_by_email(db, email)
    if auth_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        auth_repo.set_credential_password(db, auth_user, hash_password(payload.new_password), commit=False)
        auth_repo.revoke_sessions(db, auth_user.id, commit=False)
        verification = auth_repo.create_verification(
            db,
            identifier=f"password-reset:{email}",
            value=generate_verification_value(),
            ttl=PASSWORD_RESET_TTL,
            commit=False,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Error resetting password for %s: %s", email, e)
        raise HTTPException(status_code=500, detail=f"Error resetting password: {e}")

    # No mail transport: the verification is only recorded and logged
    logger.info(
        "password_reset_verification: email=%s verification_id=%s expires_at=%s",
        email,
        verification.id,
        verification.expires_at,
    )
    return schemas.ResetPasswordResponse(
        message="Password reset successfully. Please check your email to verify the change.",
        verification_sent=True,
    )
