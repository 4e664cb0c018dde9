"""
API dependency helpers.

Resolves the bearer session on the request to the auth user and the master
user, and guards write routes by master-table role.
"""
import logging
from typing import Any, Optional, Tuple

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from pulseboard.db.database import get_db
from pulseboard.db.repositories import auth as auth_repo
from pulseboard.db.repositories import users as user_repo
from pulseboard.utils.feature_flags import FEATURE_SWITCHES, is_feature_enabled

logger = logging.getLogger(__name__)


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
        return token or None
    return None


def get_current_session(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_bearer_token),
):
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="MISSING_TOKEN")
    session = auth_repo.get_active_session(db, token)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="INVALID_SESSION")
    return session


# Contract:
# Returns (master User model, AuthUser model).
# Raises 401 without a valid session, 404 when the auth user is gone.
def get_current_user_context(
    db: Session = Depends(get_db),
    session=Depends(get_current_session),
) -> Tuple[Any, Any]:
    auth_user = auth_repo.get_auth_user(db, session.user_id)
    if auth_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user, _created = user_repo.upsert_from_auth(
        db,
        email=auth_user.email,
        name=auth_user.name,
        role=auth_user.role,
        image=auth_user.image,
    )
    return user, auth_user


def require_roles(*roles: str):
    """Dependency factory: the master user must be active and hold one of ``roles``."""

    def _dependency(user_context=Depends(get_current_user_context)):
        user, auth_user = user_context
        if user.status != "active":
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account inactive")
        if user.role not in roles:
            logger.info("role_denied: user_id=%s role=%s required=%s", user.id, user.role, ",".join(roles))
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user, auth_user

    return _dependency


require_admin = require_roles("admin")
require_task_editor = require_roles("admin", "manager")


def require_feature(name: str):
    """Dependency factory: reject the request while feature ``name`` is switched off."""
    switch = FEATURE_SWITCHES[name]

    def _dependency():
        if not is_feature_enabled(name):
            raise HTTPException(status_code=switch.disabled_status, detail=switch.disabled_detail)

    return _dependency
