"""Budget item routes."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.rls import require_project_access, get_project_or_404
from app.core.activity_log import extract_fields, record_event, record_field_changes
from app.models.user import User
from app.models.budget_item import BudgetItem
from app.models.activity_log import ActivityEntityType, ActivityAction
from app.schemas.budget_item import (
    BudgetItemCreate,
    BudgetItemUpdate,
    BudgetItemResponse,
    BudgetCategorySummary,
)

router = APIRouter()


def _get_item_or_404(db: Session, project_id: int, item_id: int) -> BudgetItem:
    item = db.query(BudgetItem).filter(
        BudgetItem.project_id == project_id,
        BudgetItem.item_id == item_id
    ).first()
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Budget item not found"
        )
    return item


@router.get("/{project_id}/budget-items", response_model=List[BudgetItemResponse])
def list_budget_items(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    return db.query(BudgetItem).filter(BudgetItem.project_id == project_id).order_by(
        BudgetItem.category, BudgetItem.item_id
    ).all()


@router.get("/{project_id}/budget-summary", response_model=List[BudgetCategorySummary])
def get_budget_summary(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """Estimated vs. actual totals per budget category."""
    rows = db.query(
        BudgetItem.category,
        func.coalesce(func.sum(BudgetItem.estimated_cost), 0),
        func.coalesce(func.sum(BudgetItem.actual_cost), 0),
        func.count(BudgetItem.item_id),
    ).filter(BudgetItem.project_id == project_id).group_by(
        BudgetItem.category
    ).order_by(BudgetItem.category).all()

    return [
        BudgetCategorySummary(
            category=category,
            estimated_total=float(estimated),
            actual_total=float(actual),
            item_count=count,
        )
        for category, estimated, actual, count in rows
    ]


@router.post("/{project_id}/budget-items", response_model=BudgetItemResponse,
             status_code=status.HTTP_201_CREATED)
def create_budget_item(
    item_data: BudgetItemCreate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_project_or_404(db, project_id)
    item = BudgetItem(project_id=project_id, **item_data.model_dump())
    db.add(item)
    db.flush()

    record_event(
        db, project_id, ActivityEntityType.BUDGET_ITEM, item.item_id,
        ActivityAction.CREATED,
        performed_by=current_user.user_id,
        metadata={"name": item.name, "category": item.category}
    )
    db.commit()
    db.refresh(item)
    return item


@router.patch("/{project_id}/budget-items/{item_id}", response_model=BudgetItemResponse)
def update_budget_item(
    item_id: int,
    item_data: BudgetItemUpdate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = _get_item_or_404(db, project_id, item_id)

    update_data = item_data.model_dump(exclude_unset=True)
    old_snapshot = extract_fields(item, update_data.keys())
    for field, value in update_data.items():
        setattr(item, field, value)

    record_field_changes(
        db, project_id, ActivityEntityType.BUDGET_ITEM, item_id,
        old_snapshot, update_data, performed_by=current_user.user_id
    )
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{project_id}/budget-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget_item(
    item_id: int,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = _get_item_or_404(db, project_id, item_id)

    record_event(
        db, project_id, ActivityEntityType.BUDGET_ITEM, item_id,
        ActivityAction.DELETED,
        performed_by=current_user.user_id,
        metadata={"name": item.name}
    )
    db.delete(item)
    db.commit()
    return None
