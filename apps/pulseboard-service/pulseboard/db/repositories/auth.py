"""
Authentication repository functions.

Manages the credential store that backs sign-in: auth users, credential
accounts, bearer sessions and password-reset verification rows.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from pulseboard.db import models

CREDENTIAL_PROVIDER = "credential"


def get_auth_user(db: Session, user_id: str):
    return db.query(models.AuthUser).filter(models.AuthUser.id == user_id).first()


def get_auth_user_by_email(db: Session, email: str):
    if not email:
        return None
    return (
        db.query(models.AuthUser)
        .filter(func.lower(models.AuthUser.email) == email.strip().lower())
        .first()
    )


def create_auth_user(
    db: Session,
    *,
    name: str,
    email: str,
    role: str = "member",
    image: Optional[str] = None,
    commit: bool = True,
):
    auth_user = models.AuthUser(
        name=name,
        email=email.strip().lower(),
        role=role,
        image=image,
        email_verified=False,
    )
    db.add(auth_user)
    if commit:
        db.commit()
        db.refresh(auth_user)
    else:
        db.flush()
    return auth_user


def get_credential_account(db: Session, user_id: str):
    return (
        db.query(models.AuthAccount)
        .filter(
            models.AuthAccount.user_id == user_id,
            models.AuthAccount.provider_id == CREDENTIAL_PROVIDER,
        )
        .first()
    )


def set_credential_password(db: Session, auth_user, password_hash: str, *, commit: bool = True):
    """Replace the credential password, creating the account row when missing."""
    account = get_credential_account(db, auth_user.id)
    if account is None:
        account = models.AuthAccount(
            account_id=auth_user.email,
            provider_id=CREDENTIAL_PROVIDER,
            user_id=auth_user.id,
            password=password_hash,
        )
        db.add(account)
    else:
        account.password = password_hash
    if commit:
        db.commit()
        db.refresh(account)
    else:
        db.flush()
    return account


def update_auth_role(db: Session, auth_user, role: str):
    auth_user.role = role
    db.commit()
    db.refresh(auth_user)
    return auth_user


def create_session(
    db: Session,
    auth_user,
    *,
    token: str,
    expires_at: datetime,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
):
    session = models.AuthSession(
        token=token,
        expires_at=expires_at,
        ip_address=ip_address,
        user_agent=user_agent,
        user_id=auth_user.id,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_active_session(db: Session, token: str, *, now: Optional[datetime] = None):
    """Return the session for ``token`` unless it is unknown or expired."""
    if not token:
        return None
    session = db.query(models.AuthSession).filter(models.AuthSession.token == token).first()
    if session is None:
        return None
    if models.as_utc(session.expires_at) <= (now or models.now_utc()):
        return None
    return session


def delete_session(db: Session, token: str) -> bool:
    deleted = db.query(models.AuthSession).filter(models.AuthSession.token == token).delete()
    db.commit()
    return bool(deleted)


def revoke_sessions(db: Session, user_id: str, *, commit: bool = True) -> int:
    deleted = db.query(models.AuthSession).filter(models.AuthSession.user_id == user_id).delete()
    if commit:
        db.commit()
    return deleted


def create_verification(
    db: Session,
    *,
    identifier: str,
    value: str,
    ttl: timedelta = timedelta(hours=24),
    commit: bool = True,
):
    verification = models.AuthVerification(
        identifier=identifier,
        value=value,
        expires_at=models.now_utc() + ttl,
    )
    db.add(verification)
    if commit:
        db.commit()
        db.refresh(verification)
    else:
        db.flush()
    return verification
