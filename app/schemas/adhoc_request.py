"""Ad-hoc request schemas."""
from datetime import date, datetime
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from app.models.adhoc_request import RequestPriority, RequestStatus
from app.schemas.common import reject_null


class AdHocRequestCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    requestor_name: str = Field(..., min_length=1, max_length=255)
    requestor_email: Optional[EmailStr] = None
    requestor_department: Optional[str] = Field(None, max_length=255)
    assigned_to: Optional[int] = None
    priority: RequestPriority = RequestPriority.MEDIUM
    status: RequestStatus = RequestStatus.NEW
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    project_id: Optional[int] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class AdHocRequestUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    requestor_name: Optional[str] = Field(None, min_length=1, max_length=255)
    requestor_email: Optional[EmailStr] = None
    requestor_department: Optional[str] = Field(None, max_length=255)
    assigned_to: Optional[int] = None
    priority: Optional[RequestPriority] = None
    status: Optional[RequestStatus] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    actual_hours: Optional[float] = Field(None, ge=0)
    project_id: Optional[int] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("title", "requestor_name", "priority", "status", "actual_hours")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class AdHocRequestResponse(BaseModel):
    request_id: int
    title: str
    description: Optional[str] = None
    requestor_name: str
    requestor_email: Optional[str] = None
    requestor_department: Optional[str] = None
    assigned_to: Optional[int] = None
    assigned_to_name: Optional[str] = None
    priority: str
    status: str
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None
    actual_hours: float
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    comment_count: int = 0
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RequestCommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)


class RequestCommentResponse(BaseModel):
    comment_id: int
    request_id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    comment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdHocRequestStats(BaseModel):
    total: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    # Past due and neither completed nor cancelled
    overdue: int
