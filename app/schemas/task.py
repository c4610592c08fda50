"""Task schemas."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.models.project import Priority
from app.models.task import TaskStatus
from app.schemas.common import reject_null
from app.schemas.user import UserBrief


class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    milestone_id: Optional[int] = None
    assignee_id: Optional[int] = None
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, ge=0)

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class TaskUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    milestone_id: Optional[int] = None
    assignee_id: Optional[int] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, ge=0)

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("name", "status", "priority")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class TaskResponse(BaseModel):
    task_id: int
    project_id: int
    milestone_id: Optional[int] = None
    assignee_id: Optional[int] = None
    assignee: Optional[UserBrief] = None
    name: str
    description: Optional[str] = None
    status: str
    priority: str
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
