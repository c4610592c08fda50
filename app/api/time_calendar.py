"""Weekly time calendar route."""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.time_calendar import build_week_calendar
from app.core.rls import require_project_access
from app.schemas.time_calendar import TimeCalendarResponse

router = APIRouter()


@router.get("/{project_id}/time-calendar", response_model=TimeCalendarResponse)
def get_time_calendar(
    week_start: Optional[date] = Query(
        None, description="Any date in the wanted week (YYYY-MM-DD); defaults to today"),
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """Hours per member per day for one Sunday-to-Saturday week."""
    return build_week_calendar(db, project_id, week_start)
