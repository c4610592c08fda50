"""User model."""
import enum
from datetime import date, datetime
from typing import Optional
from sqlalchemy import String, Integer, Float, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base
from app.core.time import utc_now


class UserRole(str, enum.Enum):
    """User roles."""
    ADMIN = "Admin"
    USER = "User"


class EmploymentType(str, enum.Enum):
    """How a crew member is engaged."""
    FTE = "fte"
    CONTRACTOR = "contractor"


class User(Base):
    """User model. Every user is also a crew record."""
    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        String(50), nullable=False, default=UserRole.USER)
    # Default rate used when a time entry does not carry its own
    hourly_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    employment_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EmploymentType.FTE.value)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    # Set when the crew member is archived
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False)
