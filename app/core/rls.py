"""Row-Level Security (RLS) filters for project-scoped data."""
from fastapi import Depends, HTTPException, Path, status
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.models.user import User, UserRole
from app.models.project import Project, ProjectMember


def can_see_all_data(user: User) -> bool:
    """Admins see every project; everyone else sees projects they own or belong to."""
    return user.role == UserRole.ADMIN


def _member_project_ids(user: User, db: Session):
    return db.query(ProjectMember.project_id).filter(ProjectMember.user_id == user.user_id)


def filter_user_projects(query: Query, user: User, db: Session) -> Query:
    """Projects the user owns or is a member of, regardless of role."""
    return query.filter(
        or_(
            Project.owner_id == user.user_id,
            Project.project_id.in_(_member_project_ids(user, db))
        )
    )


def apply_project_rls(query: Query, user: User, db: Session) -> Query:
    """Restrict a Project query to projects the user owns or is a member of."""
    if can_see_all_data(user):
        return query
    return filter_user_projects(query, user, db)


def user_can_access_project(db: Session, user: User, project_id: int) -> bool:
    """History of deleted projects stays visible to admins only."""
    if can_see_all_data(user):
        return True
    query = apply_project_rls(
        db.query(Project).filter(Project.project_id == project_id), user, db)
    return db.query(query.exists()).scalar()


def require_project_access(
    project_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> int:
    """Dependency guarding every /projects/{project_id}/... route.

    Admins pass for any id, so reads against an unknown project return empty
    results instead of an error.
    """
    if not user_can_access_project(db, current_user, project_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this project"
        )
    return project_id


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.project_id == project_id).first()
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project
