"""Ad-hoc request models: work asked for outside any project plan."""
import enum
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy import String, Integer, Text, Date, DateTime, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import Base
from app.models.user import User
from app.models.project import Project
from app.core.time import utc_now


class RequestStatus(str, enum.Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestPriority(str, enum.Enum):
    """Listed most urgent first."""
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Statuses that no longer count towards overdue work
CLOSED_STATUSES = (RequestStatus.COMPLETED.value, RequestStatus.CANCELLED.value)


class AdHocRequest(Base):
    __tablename__ = "adhoc_requests"

    request_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    requestor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    requestor_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    requestor_department: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    assigned_to: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RequestPriority.MEDIUM.value)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RequestStatus.NEW.value)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    estimated_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    actual_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    # Optional link when the request turns into project work
    project_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("projects.project_id", ondelete="SET NULL"), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    assignee: Mapped[Optional["User"]] = relationship("User")
    project: Mapped[Optional["Project"]] = relationship("Project")
    comments: Mapped[List["AdHocRequestComment"]] = relationship(
        "AdHocRequestComment", back_populates="request", cascade="all, delete-orphan",
        order_by="AdHocRequestComment.comment_id")

    @property
    def assigned_to_name(self) -> Optional[str]:
        return self.assignee.full_name if self.assignee else None

    @property
    def project_name(self) -> Optional[str]:
        return self.project.name if self.project else None

    @property
    def comment_count(self) -> int:
        return len(self.comments)


class AdHocRequestComment(Base):
    __tablename__ = "adhoc_request_comments"

    comment_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    request_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("adhoc_requests.request_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False)

    request: Mapped["AdHocRequest"] = relationship("AdHocRequest", back_populates="comments")
    user: Mapped[Optional["User"]] = relationship("User")

    @property
    def user_name(self) -> Optional[str]:
        return self.user.full_name if self.user else None
