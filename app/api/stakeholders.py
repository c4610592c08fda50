"""Stakeholder routes."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.rls import require_project_access, get_project_or_404
from app.core.activity_log import extract_fields, record_event, record_field_changes
from app.models.user import User
from app.models.stakeholder import Stakeholder
from app.models.activity_log import ActivityEntityType, ActivityAction
from app.schemas.stakeholder import StakeholderCreate, StakeholderUpdate, StakeholderResponse

router = APIRouter()


def _get_stakeholder_or_404(db: Session, project_id: int, stakeholder_id: int) -> Stakeholder:
    stakeholder = db.query(Stakeholder).options(joinedload(Stakeholder.user)).filter(
        Stakeholder.project_id == project_id,
        Stakeholder.stakeholder_id == stakeholder_id
    ).first()
    if not stakeholder:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stakeholder not found"
        )
    return stakeholder


def _check_user(db: Session, user_id) -> None:
    if user_id is not None and not db.query(User).filter(User.user_id == user_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User not found"
        )


@router.get("/{project_id}/stakeholders", response_model=List[StakeholderResponse])
def list_stakeholders(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """List stakeholders, primary contacts first."""
    return db.query(Stakeholder).options(joinedload(Stakeholder.user)).filter(
        Stakeholder.project_id == project_id
    ).order_by(Stakeholder.is_primary.desc(), Stakeholder.stakeholder_id).all()


@router.post("/{project_id}/stakeholders", response_model=StakeholderResponse,
             status_code=status.HTTP_201_CREATED)
def create_stakeholder(
    stakeholder_data: StakeholderCreate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_project_or_404(db, project_id)
    _check_user(db, stakeholder_data.user_id)

    stakeholder = Stakeholder(project_id=project_id, **stakeholder_data.model_dump())
    db.add(stakeholder)
    db.flush()

    record_event(
        db, project_id, ActivityEntityType.STAKEHOLDER, stakeholder.stakeholder_id,
        ActivityAction.CREATED,
        performed_by=current_user.user_id,
        metadata={"role": stakeholder.role}
    )
    db.commit()
    db.refresh(stakeholder)
    return stakeholder


@router.patch("/{project_id}/stakeholders/{stakeholder_id}", response_model=StakeholderResponse)
def update_stakeholder(
    stakeholder_id: int,
    stakeholder_data: StakeholderUpdate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    stakeholder = _get_stakeholder_or_404(db, project_id, stakeholder_id)

    update_data = stakeholder_data.model_dump(exclude_unset=True)
    _check_user(db, update_data.get("user_id"))
    old_snapshot = extract_fields(stakeholder, update_data.keys())
    for field, value in update_data.items():
        setattr(stakeholder, field, value)

    record_field_changes(
        db, project_id, ActivityEntityType.STAKEHOLDER, stakeholder_id,
        old_snapshot, update_data, performed_by=current_user.user_id
    )
    db.commit()
    db.refresh(stakeholder)
    return stakeholder


@router.delete("/{project_id}/stakeholders/{stakeholder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stakeholder(
    stakeholder_id: int,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    stakeholder = _get_stakeholder_or_404(db, project_id, stakeholder_id)

    record_event(
        db, project_id, ActivityEntityType.STAKEHOLDER, stakeholder_id,
        ActivityAction.DELETED,
        performed_by=current_user.user_id,
        metadata={"role": stakeholder.role}
    )
    db.delete(stakeholder)
    db.commit()
    return None
