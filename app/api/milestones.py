"""Milestone routes."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.rls import require_project_access, get_project_or_404
from app.core.activity_log import (
    extract_fields,
    record_event,
    record_field_changes,
    record_status_change,
)
from app.models.user import User
from app.models.milestone import Milestone
from app.models.activity_log import ActivityEntityType, ActivityAction
from app.schemas.milestone import MilestoneCreate, MilestoneUpdate, MilestoneResponse

router = APIRouter()


def _get_milestone_or_404(db: Session, project_id: int, milestone_id: int) -> Milestone:
    milestone = db.query(Milestone).filter(
        Milestone.project_id == project_id,
        Milestone.milestone_id == milestone_id
    ).first()
    if not milestone:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Milestone not found"
        )
    return milestone


@router.get("/{project_id}/milestones", response_model=List[MilestoneResponse])
def list_milestones(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """List milestones ordered by due date."""
    return db.query(Milestone).filter(Milestone.project_id == project_id).order_by(
        Milestone.due_date.is_(None), Milestone.due_date, Milestone.milestone_id
    ).all()


@router.post("/{project_id}/milestones", response_model=MilestoneResponse,
             status_code=status.HTTP_201_CREATED)
def create_milestone(
    milestone_data: MilestoneCreate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_project_or_404(db, project_id)
    milestone = Milestone(project_id=project_id, **milestone_data.model_dump())
    db.add(milestone)
    db.flush()

    record_event(
        db, project_id, ActivityEntityType.MILESTONE, milestone.milestone_id,
        ActivityAction.CREATED,
        performed_by=current_user.user_id,
        metadata={"name": milestone.name}
    )
    db.commit()
    db.refresh(milestone)
    return milestone


@router.patch("/{project_id}/milestones/{milestone_id}", response_model=MilestoneResponse)
def update_milestone(
    milestone_id: int,
    milestone_data: MilestoneUpdate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    milestone = _get_milestone_or_404(db, project_id, milestone_id)

    update_data = milestone_data.model_dump(exclude_unset=True)
    new_status = update_data.pop("status", None)
    old_snapshot = extract_fields(milestone, update_data.keys())
    old_status = milestone.status

    for field, value in update_data.items():
        setattr(milestone, field, value)
    if new_status is not None:
        milestone.status = new_status

    record_field_changes(
        db, project_id, ActivityEntityType.MILESTONE, milestone_id,
        old_snapshot, update_data, performed_by=current_user.user_id
    )
    if new_status is not None:
        record_status_change(
            db, project_id, ActivityEntityType.MILESTONE, milestone_id,
            old_status, new_status, performed_by=current_user.user_id
        )

    db.commit()
    db.refresh(milestone)
    return milestone


@router.delete("/{project_id}/milestones/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_milestone(
    milestone_id: int,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    milestone = _get_milestone_or_404(db, project_id, milestone_id)

    record_event(
        db, project_id, ActivityEntityType.MILESTONE, milestone_id,
        ActivityAction.DELETED,
        performed_by=current_user.user_id,
        metadata={"name": milestone.name}
    )
    db.delete(milestone)
    db.commit()
    return None
