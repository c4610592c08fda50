"""Crew routes: FTE and contractor records with workload statistics.

Crew members are users. Archiving sets ``end_date`` instead of deleting the
row, so booked time and project history stay attached.
"""
import logging
import secrets
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user, require_admin
from app.core.security import get_password_hash
from app.core.time import today_utc
from app.models.user import User, EmploymentType
from app.models.project import Project, ProjectMember, ProjectStatus
from app.models.time_entry import TimeEntry
from app.schemas.crew import (
    CrewCreate,
    CrewUpdate,
    CrewArchive,
    CrewMemberResponse,
    CrewProject,
    CrewCollaborator,
    CrewMonthlyStats,
    CrewChargeability,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CURRENT_PROJECT_STATUSES = (ProjectStatus.PLANNING.value, ProjectStatus.ACTIVE.value)
COLLABORATOR_LIMIT = 10


def _get_crew_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Crew member not found"
        )
    return user


def _crew_stats(db: Session, user_ids: List[int]) -> Dict[int, dict]:
    """Booked hours plus total and current project counts per user."""
    stats = defaultdict(lambda: {"total_hours": 0.0, "total_projects": 0, "current_projects": 0})

    hours = db.query(TimeEntry.user_id, func.sum(TimeEntry.hours)).filter(
        TimeEntry.user_id.in_(user_ids)
    ).group_by(TimeEntry.user_id).all()
    for user_id, total in hours:
        stats[user_id]["total_hours"] = float(total or 0)

    projects = db.query(
        ProjectMember.user_id,
        func.count(ProjectMember.project_id),
        func.sum(case((Project.status.in_(CURRENT_PROJECT_STATUSES), 1), else_=0)),
    ).join(
        Project, Project.project_id == ProjectMember.project_id
    ).filter(
        ProjectMember.user_id.in_(user_ids)
    ).group_by(ProjectMember.user_id).all()
    for user_id, total, current in projects:
        stats[user_id]["total_projects"] = total
        stats[user_id]["current_projects"] = int(current or 0)

    return stats


def _build_crew_response(user: User, stats: dict, today: date) -> CrewMemberResponse:
    response = CrewMemberResponse.model_validate(user)
    response.is_active = user.end_date is None or user.end_date > today
    response.total_hours = stats["total_hours"]
    response.total_projects = stats["total_projects"]
    response.current_projects = stats["current_projects"]
    return response


def _single_crew_response(db: Session, user: User) -> CrewMemberResponse:
    return _build_crew_response(user, _crew_stats(db, [user.user_id])[user.user_id], today_utc())


@router.get("/", response_model=List[CrewMemberResponse])
def list_crew(
    employment_type: Optional[EmploymentType] = Query(None, description="Filter by FTE or contractor"),
    include_inactive: bool = Query(False, description="Include archived crew members"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List crew members, active ones first, then by name."""
    today = today_utc()
    query = db.query(User)
    if employment_type:
        query = query.filter(User.employment_type == employment_type.value)
    if not include_inactive:
        query = query.filter(or_(User.end_date.is_(None), User.end_date > today))

    users = query.order_by(User.end_date.isnot(None), User.full_name).all()
    stats = _crew_stats(db, [u.user_id for u in users])
    return [_build_crew_response(u, stats[u.user_id], today) for u in users]


@router.post("/", response_model=CrewMemberResponse, status_code=status.HTTP_201_CREATED)
def create_crew_member(
    crew_data: CrewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Add a crew member. Without a password the account cannot log in."""
    if db.query(User).filter(User.email == crew_data.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    data = crew_data.model_dump(exclude={"password"})
    password = crew_data.password or secrets.token_urlsafe(32)
    user = User(**data, password_hash=get_password_hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return _single_crew_response(db, user)


@router.get("/{user_id}", response_model=CrewMemberResponse)
def get_crew_member(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _single_crew_response(db, _get_crew_or_404(db, user_id))


@router.patch("/{user_id}", response_model=CrewMemberResponse)
def update_crew_member(
    user_id: int,
    crew_data: CrewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    user = _get_crew_or_404(db, user_id)
    for field, value in crew_data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return _single_crew_response(db, user)


@router.post("/{user_id}/archive", response_model=CrewMemberResponse)
def archive_crew_member(
    user_id: int,
    archive_data: Optional[CrewArchive] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Close a crew member's engagement, effective today unless a date is given."""
    user = _get_crew_or_404(db, user_id)
    end_date = archive_data.end_date if archive_data and archive_data.end_date else today_utc()
    user.end_date = end_date
    db.commit()
    db.refresh(user)
    logger.info("crew member %s archived as of %s by user %s",
                user_id, end_date, current_user.user_id)
    return _single_crew_response(db, user)


@router.post("/{user_id}/reactivate", response_model=CrewMemberResponse)
def reactivate_crew_member(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    user = _get_crew_or_404(db, user_id)
    user.end_date = None
    db.commit()
    db.refresh(user)
    return _single_crew_response(db, user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_crew_member(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Permanently delete a crew member. Prefer archiving."""
    user = _get_crew_or_404(db, user_id)
    if user.user_id == current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )
    db.delete(user)
    db.commit()
    logger.info("crew member %s deleted by user %s", user_id, current_user.user_id)
    return None


# =============================================================================
# Workload details
# =============================================================================

@router.get("/{user_id}/projects", response_model=List[CrewProject])
def get_crew_projects(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Projects the crew member belongs to with the hours they booked on each."""
    _get_crew_or_404(db, user_id)

    hours = dict(
        db.query(TimeEntry.project_id, func.sum(TimeEntry.hours))
        .filter(TimeEntry.user_id == user_id)
        .group_by(TimeEntry.project_id)
        .all()
    )
    rows = db.query(Project, ProjectMember.role).join(
        ProjectMember, ProjectMember.project_id == Project.project_id
    ).filter(
        ProjectMember.user_id == user_id
    ).order_by(
        Project.status != ProjectStatus.ACTIVE.value, Project.name
    ).all()

    return [
        CrewProject(
            project_id=project.project_id,
            name=project.name,
            status=project.status,
            role=role,
            hours=float(hours.get(project.project_id) or 0),
        )
        for project, role in rows
    ]


@router.get("/{user_id}/collaborators", response_model=List[CrewCollaborator])
def get_crew_collaborators(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Most frequent co-members across shared projects."""
    _get_crew_or_404(db, user_id)

    own_projects = db.query(ProjectMember.project_id).filter(ProjectMember.user_id == user_id)
    shared = defaultdict(set)
    for other_id, project_id in db.query(ProjectMember.user_id, ProjectMember.project_id).filter(
        ProjectMember.project_id.in_(own_projects),
        ProjectMember.user_id != user_id
    ).all():
        shared[other_id].add(project_id)
    if not shared:
        return []

    hours_together = defaultdict(float)
    for other_id, project_id, hours in db.query(
        TimeEntry.user_id, TimeEntry.project_id, func.sum(TimeEntry.hours)
    ).filter(
        TimeEntry.user_id.in_(list(shared))
    ).group_by(TimeEntry.user_id, TimeEntry.project_id).all():
        if project_id in shared[other_id]:
            hours_together[other_id] += float(hours or 0)

    names = dict(db.query(User.user_id, User.full_name).filter(User.user_id.in_(list(shared))).all())
    collaborators = [
        CrewCollaborator(
            user_id=other_id,
            full_name=names.get(other_id, "Unknown"),
            projects_together=len(project_ids),
            hours_together=hours_together[other_id],
        )
        for other_id, project_ids in shared.items()
    ]
    collaborators.sort(key=lambda c: (-c.projects_together, -c.hours_together, c.full_name))
    return collaborators[:COLLABORATOR_LIMIT]


@router.get("/{user_id}/monthly-stats", response_model=List[CrewMonthlyStats])
def get_crew_monthly_stats(
    user_id: int,
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Defaults to the current year"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Hours, billable cost and distinct projects per month of one year.

    Cost uses the entry's own rate, falling back to the crew member's rate.
    """
    user = _get_crew_or_404(db, user_id)
    year = year or today_utc().year

    entries = db.query(TimeEntry).filter(
        TimeEntry.user_id == user_id,
        TimeEntry.entry_date >= date(year, 1, 1),
        TimeEntry.entry_date <= date(year, 12, 31)
    ).all()

    months = defaultdict(lambda: {"hours": 0.0, "cost": 0.0, "projects": set()})
    for entry in entries:
        bucket = months[entry.entry_date.month]
        bucket["hours"] += entry.hours
        if entry.billable:
            rate = entry.hourly_rate if entry.hourly_rate is not None else (user.hourly_rate or 0)
            bucket["cost"] += entry.hours * rate
        bucket["projects"].add(entry.project_id)

    return [
        CrewMonthlyStats(
            year=year,
            month=month,
            hours=bucket["hours"],
            cost=bucket["cost"],
            projects=len(bucket["projects"]),
        )
        for month, bucket in sorted(months.items())
    ]


@router.get("/{user_id}/chargeability", response_model=CrewChargeability)
def get_crew_chargeability(
    user_id: int,
    start_date: Optional[date] = Query(None, description="Defaults to 1 January of this year"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Billable hours as a percentage of all hours booked in the window."""
    _get_crew_or_404(db, user_id)
    today = today_utc()
    start_date = start_date or date(today.year, 1, 1)
    end_date = end_date or today
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date"
        )

    billable_hours, total_hours = db.query(
        func.coalesce(func.sum(case((TimeEntry.billable == True, TimeEntry.hours), else_=0)), 0),
        func.coalesce(func.sum(TimeEntry.hours), 0),
    ).filter(
        TimeEntry.user_id == user_id,
        TimeEntry.entry_date >= start_date,
        TimeEntry.entry_date <= end_date
    ).one()

    billable_hours = float(billable_hours)
    total_hours = float(total_hours)
    return CrewChargeability(
        start_date=start_date,
        end_date=end_date,
        billable_hours=billable_hours,
        total_hours=total_hours,
        chargeability=(billable_hours / total_hours * 100) if total_hours else 0.0,
    )
