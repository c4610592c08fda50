"""Activity log model: the append-only audit ledger for project changes."""
import enum
from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import Base
from app.models.user import User
from app.core.time import utc_now


class ActivityEntityType(str, enum.Enum):
    """Entity types tracked by the activity log."""
    PROJECT = "project"
    TASK = "task"
    MILESTONE = "milestone"
    MEMBER = "member"
    STAKEHOLDER = "stakeholder"
    BUDGET_ITEM = "budget_item"
    FILE = "file"


class ActivityAction(str, enum.Enum):
    """Kinds of change recorded in the activity log."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STATUS_CHANGED = "status_changed"


class ActivityLog(Base):
    """One recorded change to one project entity.

    Rows are only ever inserted. ``project_id`` carries no foreign key; a
    project's history outlives the project row.
    """
    __tablename__ = "activity_log"
    __table_args__ = (
        Index("ix_activity_log_project_performed", "project_id", "performed_at"),
        Index("ix_activity_log_entity", "entity_type", "entity_id", "project_id"),
    )

    log_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    # Only set for single-field updated/status_changed records
    field_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    old_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    new_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # NULL means the change was made by the system
    performed_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    performed_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False)
    # "metadata" is reserved on declarative classes
    extra: Mapped[Optional[Dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)

    performer: Mapped[Optional["User"]] = relationship("User")
