"""Project and project membership routes."""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.rls import (
    apply_project_rls,
    filter_user_projects,
    require_project_access,
    get_project_or_404,
)
from app.core.activity_log import (
    extract_fields,
    record_event,
    record_field_changes,
    record_status_change,
)
from app.models.user import User
from app.models.project import Project, ProjectMember
from app.models.task import Task, TaskStatus
from app.models.time_entry import TimeEntry
from app.models.activity_log import ActivityEntityType, ActivityAction
from app.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    MyProjectResponse,
    ProjectMemberCreate,
    ProjectMemberResponse,
    ProjectSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.get("/", response_model=List[ProjectResponse])
def list_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List projects visible to the current user, newest first."""
    query = db.query(Project).options(joinedload(Project.owner))
    query = apply_project_rls(query, current_user, db)
    return query.order_by(Project.created_at.desc(), Project.project_id.desc()).all()


@router.get("/my", response_model=List[MyProjectResponse])
def list_my_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Projects the current user owns or belongs to, with member and task counts.

    Admins get their own projects here too, not the whole portfolio.
    """
    query = db.query(Project).options(joinedload(Project.owner))
    projects = filter_user_projects(query, current_user, db).order_by(
        Project.created_at.desc(), Project.project_id.desc()).all()
    project_ids = [p.project_id for p in projects]

    member_counts = dict(
        db.query(ProjectMember.project_id, func.count(ProjectMember.user_id))
        .filter(ProjectMember.project_id.in_(project_ids))
        .group_by(ProjectMember.project_id)
        .all()
    )
    task_counts = {
        project_id: (total, completed or 0)
        for project_id, total, completed in db.query(
            Task.project_id,
            func.count(Task.task_id),
            func.sum(case((Task.status == TaskStatus.COMPLETED.value, 1), else_=0)),
        ).filter(Task.project_id.in_(project_ids)).group_by(Task.project_id).all()
    }

    responses = []
    for project in projects:
        response = MyProjectResponse.model_validate(project)
        response.member_count = member_counts.get(project.project_id, 0)
        response.task_count, response.completed_tasks = task_counts.get(project.project_id, (0, 0))
        responses.append(response)
    return responses


@router.post("/", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a project owned by the current user."""
    data = project_data.model_dump(exclude={"members"})
    project = Project(**data, owner_id=current_user.user_id)
    db.add(project)
    db.flush()

    record_event(
        db, project.project_id, ActivityEntityType.PROJECT, project.project_id,
        ActivityAction.CREATED,
        performed_by=current_user.user_id,
        metadata={"name": project.name}
    )

    for user_id in dict.fromkeys(project_data.members):
        member_user = _get_user_or_404(db, user_id)
        db.add(ProjectMember(project_id=project.project_id, user_id=user_id))
        record_event(
            db, project.project_id, ActivityEntityType.MEMBER, user_id,
            ActivityAction.CREATED,
            performed_by=current_user.user_id,
            metadata={"user_name": member_user.full_name, "role": "member"}
        )

    db.commit()
    db.refresh(project)
    return project


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """Get a specific project."""
    return get_project_or_404(db, project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_data: ProjectUpdate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a project. Status transitions are logged as status changes."""
    project = get_project_or_404(db, project_id)

    update_data = project_data.model_dump(exclude_unset=True)
    if update_data.get("owner_id") is not None:
        _get_user_or_404(db, update_data["owner_id"])

    new_status = update_data.pop("status", None)
    old_snapshot = extract_fields(project, update_data.keys())
    old_status = project.status

    for field, value in update_data.items():
        setattr(project, field, value)
    if new_status is not None:
        project.status = new_status

    record_field_changes(
        db, project_id, ActivityEntityType.PROJECT, project_id,
        old_snapshot, update_data, performed_by=current_user.user_id
    )
    if new_status is not None:
        record_status_change(
            db, project_id, ActivityEntityType.PROJECT, project_id,
            old_status, new_status, performed_by=current_user.user_id
        )

    db.commit()
    db.refresh(project)
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a project. Its activity history is kept."""
    project = get_project_or_404(db, project_id)

    record_event(
        db, project_id, ActivityEntityType.PROJECT, project_id,
        ActivityAction.DELETED,
        performed_by=current_user.user_id,
        metadata={"name": project.name}
    )
    db.delete(project)
    db.commit()
    logger.info("project %s deleted by user %s", project_id, current_user.user_id)
    return None


@router.get("/{project_id}/summary", response_model=ProjectSummary)
def get_project_summary(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """Total hours, billable cost and distinct contributors for a project."""
    total_hours, total_cost, contributors = db.query(
        func.coalesce(func.sum(TimeEntry.hours), 0),
        func.coalesce(func.sum(case(
            (TimeEntry.billable == True, TimeEntry.hours * func.coalesce(TimeEntry.hourly_rate, 0)),
            else_=0
        )), 0),
        func.count(func.distinct(TimeEntry.user_id)),
    ).filter(TimeEntry.project_id == project_id).one()

    return ProjectSummary(
        project_id=project_id,
        total_hours=float(total_hours),
        total_cost=float(total_cost),
        contributors=contributors,
    )


# =============================================================================
# Members
# =============================================================================

@router.get("/{project_id}/members", response_model=List[ProjectMemberResponse])
def list_members(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """List project members in the order they were added."""
    return db.query(ProjectMember).options(joinedload(ProjectMember.user)).filter(
        ProjectMember.project_id == project_id
    ).order_by(ProjectMember.added_at, ProjectMember.user_id).all()


@router.post("/{project_id}/members", response_model=ProjectMemberResponse,
             status_code=status.HTTP_201_CREATED)
def add_member(
    member_data: ProjectMemberCreate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add a member, or change the role of an existing one."""
    get_project_or_404(db, project_id)
    user = _get_user_or_404(db, member_data.user_id)

    member = db.query(ProjectMember).filter(
        ProjectMember.project_id == project_id,
        ProjectMember.user_id == member_data.user_id
    ).first()

    if member:
        old_snapshot = {"role": member.role}
        member.role = member_data.role
        record_field_changes(
            db, project_id, ActivityEntityType.MEMBER, user.user_id,
            old_snapshot, {"role": member_data.role},
            performed_by=current_user.user_id
        )
    else:
        member = ProjectMember(
            project_id=project_id, user_id=user.user_id, role=member_data.role)
        db.add(member)
        record_event(
            db, project_id, ActivityEntityType.MEMBER, user.user_id,
            ActivityAction.CREATED,
            performed_by=current_user.user_id,
            metadata={"user_name": user.full_name, "role": member_data.role}
        )

    db.commit()
    db.refresh(member)
    return member


@router.delete("/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    user_id: int,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Remove a member from a project."""
    member = db.query(ProjectMember).options(joinedload(ProjectMember.user)).filter(
        ProjectMember.project_id == project_id,
        ProjectMember.user_id == user_id
    ).first()
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found"
        )

    record_event(
        db, project_id, ActivityEntityType.MEMBER, user_id,
        ActivityAction.DELETED,
        performed_by=current_user.user_id,
        metadata={"user_name": member.user.full_name, "role": member.role}
    )
    db.delete(member)
    db.commit()
    return None
