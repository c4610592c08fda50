"""Stakeholder model."""
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import Base
from app.models.user import User
from app.core.time import utc_now


class StakeholderRole(str, enum.Enum):
    SPONSOR = "sponsor"
    BUSINESS_OWNER = "business_owner"
    STEERING_COMMITTEE = "steering_committee"
    SUBJECT_MATTER_EXPERT = "subject_matter_expert"


class Stakeholder(Base):
    """A stakeholder is either an internal user or an external contact."""
    __tablename__ = "project_stakeholders"

    stakeholder_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    external_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    external_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    external_organization: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False)

    user: Mapped[Optional["User"]] = relationship("User")
