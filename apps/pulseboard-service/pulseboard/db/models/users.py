from sqlalchemy import Column, Integer, String, DateTime, Text, Index, CheckConstraint
from .base import Base, now_utc


USER_ROLES = ("admin", "manager", "member")
USER_STATUSES = ("active", "inactive")


class User(Base):
    """Master user/profile record, distinct from the auth provider's user."""
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    position = Column(String(255), nullable=True)
    # 'active'|'inactive'
    status = Column(String(20), nullable=False, default='active')
    # 'admin'|'manager'|'member'
    role = Column(String(20), nullable=False, default='member')
    join_date = Column(DateTime(timezone=True), nullable=True)
    avatar_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_users_role', 'role'),
        CheckConstraint("status in ('active','inactive')", name='ck_users_status'),
        CheckConstraint("role in ('admin','manager','member')", name='ck_users_role'),
    )
