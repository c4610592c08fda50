"""Project file metadata model. File contents live outside the database."""
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import Base
from app.models.user import User
from app.core.time import utc_now


class FileCategory(str, enum.Enum):
    BUSINESS_CASE = "business_case"
    PROPOSAL = "proposal"
    CHARTER = "charter"
    BUDGET = "budget"
    STATUS_REPORT = "status_report"
    OTHER = "other"


class ProjectFile(Base):
    __tablename__ = "project_files"

    file_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    mime_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    category: Mapped[str] = mapped_column(
        String(50), nullable=False, default=FileCategory.OTHER.value)
    uploaded_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False)

    uploader: Mapped[Optional["User"]] = relationship("User")
