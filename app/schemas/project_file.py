"""Project file schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.models.project_file import FileCategory
from app.schemas.common import reject_null


class ProjectFileCreate(BaseModel):
    file_name: str = Field(..., min_length=1, max_length=255)
    file_path: str = Field(..., min_length=1, max_length=1000)
    file_size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = None
    category: FileCategory = FileCategory.OTHER

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class ProjectFileUpdate(BaseModel):
    file_name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[FileCategory] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("file_name", "category")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class ProjectFileResponse(BaseModel):
    file_id: int
    project_id: int
    file_name: str
    file_path: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    category: str
    uploaded_by: Optional[int] = None
    uploaded_at: datetime

    class Config:
        from_attributes = True
