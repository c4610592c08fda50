"""Project file metadata routes."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.rls import require_project_access, get_project_or_404
from app.core.activity_log import extract_fields, record_event, record_field_changes
from app.models.user import User
from app.models.project_file import ProjectFile
from app.models.activity_log import ActivityEntityType, ActivityAction
from app.schemas.project_file import ProjectFileCreate, ProjectFileUpdate, ProjectFileResponse

router = APIRouter()


def _get_file_or_404(db: Session, project_id: int, file_id: int) -> ProjectFile:
    project_file = db.query(ProjectFile).filter(
        ProjectFile.project_id == project_id,
        ProjectFile.file_id == file_id
    ).first()
    if not project_file:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )
    return project_file


@router.get("/{project_id}/files", response_model=List[ProjectFileResponse])
def list_files(
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    return db.query(ProjectFile).filter(ProjectFile.project_id == project_id).order_by(
        ProjectFile.uploaded_at.desc(), ProjectFile.file_id.desc()
    ).all()


@router.post("/{project_id}/files", response_model=ProjectFileResponse,
             status_code=status.HTTP_201_CREATED)
def create_file(
    file_data: ProjectFileCreate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Register an uploaded file against a project."""
    get_project_or_404(db, project_id)
    project_file = ProjectFile(
        project_id=project_id,
        uploaded_by=current_user.user_id,
        **file_data.model_dump()
    )
    db.add(project_file)
    db.flush()

    record_event(
        db, project_id, ActivityEntityType.FILE, project_file.file_id,
        ActivityAction.CREATED,
        performed_by=current_user.user_id,
        metadata={"file_name": project_file.file_name, "category": project_file.category}
    )
    db.commit()
    db.refresh(project_file)
    return project_file


@router.patch("/{project_id}/files/{file_id}", response_model=ProjectFileResponse)
def update_file(
    file_id: int,
    file_data: ProjectFileUpdate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rename or recategorize a file."""
    project_file = _get_file_or_404(db, project_id, file_id)

    update_data = file_data.model_dump(exclude_unset=True)
    old_snapshot = extract_fields(project_file, update_data.keys())
    for field, value in update_data.items():
        setattr(project_file, field, value)

    record_field_changes(
        db, project_id, ActivityEntityType.FILE, file_id,
        old_snapshot, update_data, performed_by=current_user.user_id
    )
    db.commit()
    db.refresh(project_file)
    return project_file


@router.delete("/{project_id}/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    file_id: int,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    project_file = _get_file_or_404(db, project_id, file_id)

    record_event(
        db, project_id, ActivityEntityType.FILE, file_id,
        ActivityAction.DELETED,
        performed_by=current_user.user_id,
        metadata={"file_name": project_file.file_name}
    )
    db.delete(project_file)
    db.commit()
    return None
