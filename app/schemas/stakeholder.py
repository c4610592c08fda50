"""Stakeholder schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from app.models.stakeholder import StakeholderRole
from app.schemas.common import reject_null
from app.schemas.user import UserBrief


class StakeholderCreate(BaseModel):
    user_id: Optional[int] = None
    external_name: Optional[str] = Field(None, max_length=255)
    external_email: Optional[EmailStr] = None
    external_organization: Optional[str] = Field(None, max_length=255)
    role: StakeholderRole
    is_primary: bool = False
    notes: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    @model_validator(mode="after")
    def require_user_or_external_name(self):
        if self.user_id is None and not self.external_name:
            raise ValueError("Either user_id or external_name is required")
        return self


class StakeholderUpdate(BaseModel):
    user_id: Optional[int] = None
    external_name: Optional[str] = Field(None, max_length=255)
    external_email: Optional[EmailStr] = None
    external_organization: Optional[str] = Field(None, max_length=255)
    role: Optional[StakeholderRole] = None
    is_primary: Optional[bool] = None
    notes: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("role", "is_primary")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class StakeholderResponse(BaseModel):
    stakeholder_id: int
    project_id: int
    user_id: Optional[int] = None
    user: Optional[UserBrief] = None
    external_name: Optional[str] = None
    external_email: Optional[str] = None
    external_organization: Optional[str] = None
    role: str
    is_primary: bool
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
