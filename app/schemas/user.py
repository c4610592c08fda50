"""User schemas."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    role: str = "User"
    hourly_rate: Optional[float] = Field(None, ge=0)
    department: Optional[str] = None
    title: Optional[str] = None


class UserResponse(UserBase):
    user_id: int
    role: str
    hourly_rate: Optional[float] = None
    department: Optional[str] = None
    title: Optional[str] = None
    employment_type: str = "fte"

    model_config = ConfigDict(from_attributes=True)


class UserBrief(BaseModel):
    user_id: int
    full_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
