"""
Authentication tables.

These shadow the master ``users`` table and are linked to it only by email.
"""
import uuid
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index, Text
from sqlalchemy.orm import relationship
from .base import Base, now_utc


def _new_id() -> str:
    return uuid.uuid4().hex


class AuthUser(Base):
    __tablename__ = 'auth_users'
    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    image = Column(Text, nullable=True)
    role = Column(String(20), nullable=False, default='member')
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")
    accounts = relationship("AuthAccount", back_populates="user", cascade="all, delete-orphan")


class AuthSession(Base):
    __tablename__ = 'auth_sessions'
    id = Column(String(64), primary_key=True, default=_new_id)
    token = Column(String(128), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    user_id = Column(String(64), ForeignKey('auth_users.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    user = relationship("AuthUser", back_populates="sessions")

    __table_args__ = (
        Index('idx_auth_sessions_user_id', 'user_id'),
    )


class AuthAccount(Base):
    __tablename__ = 'auth_accounts'
    id = Column(String(64), primary_key=True, default=_new_id)
    account_id = Column(String(320), nullable=False)
    # Only 'credential' accounts are managed by this service
    provider_id = Column(String(50), nullable=False, default='credential')
    user_id = Column(String(64), ForeignKey('auth_users.id', ondelete='CASCADE'), nullable=False)
    password = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    user = relationship("AuthUser", back_populates="accounts")

    __table_args__ = (
        Index('idx_auth_accounts_user_provider', 'user_id', 'provider_id'),
    )


class AuthVerification(Base):
    __tablename__ = 'auth_verifications'
    id = Column(String(64), primary_key=True, default=_new_id)
    identifier = Column(String(320), nullable=False)
    value = Column(Text, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('idx_auth_verifications_identifier', 'identifier'),
    )
