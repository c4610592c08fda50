"""Time entry routes."""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.rls import can_see_all_data, require_project_access, get_project_or_404
from app.models.user import User
from app.models.project import Project
from app.models.time_entry import TimeEntry
from app.schemas.time_entry import TimeEntryCreate, TimeEntryResponse

# Mounted under /projects
project_router = APIRouter()
# Mounted under /time-entries
router = APIRouter()


def _build_entry_response(entry: TimeEntry) -> TimeEntryResponse:
    response = TimeEntryResponse.model_validate(entry)
    response.user_name = entry.user.full_name if entry.user else None
    return response


def _entry_cost(entry: TimeEntry) -> Decimal:
    if not entry.billable or not entry.hourly_rate:
        return Decimal("0")
    return Decimal(str(entry.hours)) * Decimal(str(entry.hourly_rate))


@project_router.get("/{project_id}/time-entries", response_model=List[TimeEntryResponse])
def list_project_time_entries(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """List a project's time entries, most recent day first."""
    entries = db.query(TimeEntry).options(joinedload(TimeEntry.user)).filter(
        TimeEntry.project_id == project_id
    ).order_by(TimeEntry.entry_date.desc(), TimeEntry.created_at.desc()).all()
    return [_build_entry_response(e) for e in entries]


@project_router.post("/{project_id}/time-entries", response_model=TimeEntryResponse,
                     status_code=status.HTTP_201_CREATED)
def create_time_entry(
    entry_data: TimeEntryCreate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Book hours for the current user.

    Billable entries add hours x rate to the project's spent amount. The rate
    falls back to the user's default hourly rate.
    """
    project = get_project_or_404(db, project_id)
    data = entry_data.model_dump()
    if data["hourly_rate"] is None:
        data["hourly_rate"] = current_user.hourly_rate

    entry = TimeEntry(project_id=project_id, user_id=current_user.user_id, **data)
    db.add(entry)
    project.spent = (project.spent or Decimal("0")) + _entry_cost(entry)

    db.commit()
    db.refresh(entry)
    return _build_entry_response(entry)


@router.get("/my", response_model=List[TimeEntryResponse])
def list_my_time_entries(
    start_date: Optional[date] = Query(None, description="Inclusive lower bound"),
    end_date: Optional[date] = Query(None, description="Inclusive upper bound"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List the current user's time entries across projects."""
    query = db.query(TimeEntry).options(joinedload(TimeEntry.user)).filter(
        TimeEntry.user_id == current_user.user_id
    )
    if start_date:
        query = query.filter(TimeEntry.entry_date >= start_date)
    if end_date:
        query = query.filter(TimeEntry.entry_date <= end_date)
    entries = query.order_by(TimeEntry.entry_date.desc(), TimeEntry.created_at.desc()).all()
    return [_build_entry_response(e) for e in entries]


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete one of your own time entries (admins may delete any)."""
    entry = db.query(TimeEntry).filter(TimeEntry.entry_id == entry_id).first()
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Time entry not found"
        )
    if entry.user_id != current_user.user_id and not can_see_all_data(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own time entries"
        )

    project = db.query(Project).filter(Project.project_id == entry.project_id).first()
    if project:
        project.spent = max(Decimal("0"), (project.spent or Decimal("0")) - _entry_cost(entry))

    db.delete(entry)
    db.commit()
    return None
