"""Crew schemas: users viewed as FTE or contractor staff."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from app.models.user import EmploymentType, UserRole
from app.schemas.common import reject_null


class CrewCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    # Crew without a password cannot log in
    password: Optional[str] = Field(None, min_length=8)
    role: UserRole = UserRole.USER
    hourly_rate: Optional[float] = Field(None, ge=0)
    employment_type: EmploymentType = EmploymentType.FTE
    department: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class CrewUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[UserRole] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    employment_type: Optional[EmploymentType] = None
    department: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("full_name", "role", "employment_type")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class CrewArchive(BaseModel):
    """Defaults to today when no end date is given."""
    end_date: Optional[date] = None


class CrewMemberResponse(BaseModel):
    user_id: int
    email: str
    full_name: str
    role: str
    hourly_rate: Optional[float] = None
    employment_type: str
    department: Optional[str] = None
    title: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    is_active: bool = True
    total_hours: float = 0
    total_projects: int = 0
    current_projects: int = 0

    model_config = ConfigDict(from_attributes=True)


class CrewProject(BaseModel):
    project_id: int
    name: str
    status: str
    role: str
    hours: float


class CrewCollaborator(BaseModel):
    user_id: int
    full_name: str
    projects_together: int
    hours_together: float


class CrewMonthlyStats(BaseModel):
    year: int
    month: int
    hours: float
    cost: float
    projects: int


class CrewChargeability(BaseModel):
    """Billable share of booked hours, as a percentage."""
    start_date: date
    end_date: date
    billable_hours: float
    total_hours: float
    chargeability: float
