"""Budget item schemas."""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.models.budget_item import BudgetCategory
from app.schemas.common import reject_null


class BudgetItemCreate(BaseModel):
    category: BudgetCategory
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    estimated_cost: Decimal = Field(Decimal("0"), ge=0)
    actual_cost: Decimal = Field(Decimal("0"), ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class BudgetItemUpdate(BaseModel):
    category: Optional[BudgetCategory] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    estimated_cost: Optional[Decimal] = Field(None, ge=0)
    actual_cost: Optional[Decimal] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("category", "name", "estimated_cost", "actual_cost")
    @classmethod
    def validate_required(cls, v):
        return reject_null(v)


class BudgetItemResponse(BaseModel):
    item_id: int
    project_id: int
    category: str
    name: str
    description: Optional[str] = None
    estimated_cost: float
    actual_cost: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BudgetCategorySummary(BaseModel):
    category: str
    estimated_total: float
    actual_total: float
    item_count: int
