from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, Text, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base, now_utc


TASK_STATUSES = ("todo", "in-progress", "completed", "cancelled")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


class Task(Base):
    __tablename__ = 'tasks'
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # 'todo'|'in-progress'|'completed'|'cancelled'
    status = Column(String(20), nullable=False, default='todo')
    # 'low'|'medium'|'high'|'urgent'
    priority = Column(String(20), nullable=False, default='medium')
    category_id = Column(Integer, ForeignKey('task_categories.id'), nullable=True)
    points = Column(Integer, nullable=False, default=0)
    # Comma-separated master user ids, e.g. "1,3"
    assignee_ids = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    category = relationship("TaskCategory", back_populates="tasks")

    __table_args__ = (
        Index('idx_tasks_status', 'status'),
        Index('idx_tasks_category_id', 'category_id'),
        Index('idx_tasks_updated_at', 'updated_at'),
        CheckConstraint("points >= 0", name='ck_tasks_points_non_negative'),
    )
