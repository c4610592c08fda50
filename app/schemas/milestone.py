"""Milestone schemas."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.models.milestone import MilestoneStatus
from app.schemas.common import reject_null


class MilestoneCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    status: MilestoneStatus = MilestoneStatus.PENDING

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class MilestoneUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[MilestoneStatus] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("name", "status")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class MilestoneResponse(BaseModel):
    milestone_id: int
    project_id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
