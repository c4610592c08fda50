"""Project and membership schemas."""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.models.project import ProjectStatus, Priority
from app.schemas.common import reject_null
from app.schemas.user import UserBrief


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Decimal = Field(Decimal("0"), ge=0)
    color: str = Field("#3b82f6", max_length=20)

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class ProjectCreate(ProjectBase):
    # Initial members, added with the default "member" role
    members: List[int] = []


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    color: Optional[str] = Field(None, max_length=20)
    owner_id: Optional[int] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("name", "status", "priority", "budget", "color")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class ProjectResponse(BaseModel):
    project_id: int
    name: str
    description: Optional[str] = None
    status: str
    priority: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: float
    spent: float
    color: str
    owner_id: Optional[int] = None
    owner: Optional[UserBrief] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MyProjectResponse(ProjectResponse):
    member_count: int = 0
    task_count: int = 0
    completed_tasks: int = 0


class ProjectMemberCreate(BaseModel):
    user_id: int
    role: str = Field("member", min_length=1, max_length=50)


class ProjectMemberResponse(BaseModel):
    user_id: int
    role: str
    added_at: datetime
    user: UserBrief

    model_config = ConfigDict(from_attributes=True)


class ProjectSummary(BaseModel):
    """Time and cost roll-up for one project."""
    project_id: int
    total_hours: float
    total_cost: float
    contributors: int
