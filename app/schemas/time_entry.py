"""Time entry schemas."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TimeEntryCreate(BaseModel):
    hours: float = Field(..., ge=0.1)
    description: Optional[str] = None
    entry_date: date
    billable: bool = True
    hourly_rate: Optional[float] = Field(None, ge=0)


class TimeEntryResponse(BaseModel):
    entry_id: int
    project_id: int
    user_id: int
    user_name: Optional[str] = None
    hours: float
    description: Optional[str] = None
    entry_date: date
    billable: bool
    hourly_rate: Optional[float] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
