"""Task routes."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
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
from app.models.task import Task, TaskStatus
from app.models.milestone import Milestone
from app.models.activity_log import ActivityEntityType, ActivityAction
from app.schemas.task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskResponse

router = APIRouter()


def _get_task_or_404(db: Session, project_id: int, task_id: int) -> Task:
    task = db.query(Task).options(joinedload(Task.assignee)).filter(
        Task.project_id == project_id,
        Task.task_id == task_id
    ).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


def _validate_references(db: Session, project_id: int, data: dict) -> None:
    """Milestones must belong to the same project; assignees must exist."""
    milestone_id = data.get("milestone_id")
    if milestone_id is not None:
        exists = db.query(Milestone).filter(
            Milestone.milestone_id == milestone_id,
            Milestone.project_id == project_id
        ).first()
        if not exists:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Milestone does not belong to this project"
            )
    assignee_id = data.get("assignee_id")
    if assignee_id is not None:
        if not db.query(User).filter(User.user_id == assignee_id).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Assignee not found"
            )


@router.get("/{project_id}/tasks", response_model=List[TaskResponse])
def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status", description="Filter by task status"),
    milestone_id: Optional[int] = Query(None, description="Filter by milestone"),
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """List tasks for a project (Kanban board source)."""
    query = db.query(Task).options(joinedload(Task.assignee)).filter(Task.project_id == project_id)
    if status_filter:
        query = query.filter(Task.status == status_filter.value)
    if milestone_id is not None:
        query = query.filter(Task.milestone_id == milestone_id)
    return query.order_by(Task.task_id).all()


@router.post("/{project_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_project_or_404(db, project_id)
    data = task_data.model_dump()
    _validate_references(db, project_id, data)

    task = Task(project_id=project_id, **data)
    db.add(task)
    db.flush()

    record_event(
        db, project_id, ActivityEntityType.TASK, task.task_id,
        ActivityAction.CREATED,
        performed_by=current_user.user_id,
        metadata={"name": task.name}
    )
    db.commit()
    db.refresh(task)
    return task


@router.patch("/{project_id}/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update task fields; a status change in the payload is logged as a status change."""
    task = _get_task_or_404(db, project_id, task_id)

    update_data = task_data.model_dump(exclude_unset=True)
    _validate_references(db, project_id, update_data)
    new_status = update_data.pop("status", None)
    old_snapshot = extract_fields(task, update_data.keys())
    old_status = task.status

    for field, value in update_data.items():
        setattr(task, field, value)
    if new_status is not None:
        task.status = new_status

    record_field_changes(
        db, project_id, ActivityEntityType.TASK, task_id,
        old_snapshot, update_data, performed_by=current_user.user_id
    )
    if new_status is not None:
        record_status_change(
            db, project_id, ActivityEntityType.TASK, task_id,
            old_status, new_status, performed_by=current_user.user_id
        )

    db.commit()
    db.refresh(task)
    return task


@router.patch("/{project_id}/tasks/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: int,
    status_data: TaskStatusUpdate,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Move a task between Kanban columns."""
    task = _get_task_or_404(db, project_id, task_id)
    old_status = task.status
    task.status = status_data.status

    record_status_change(
        db, project_id, ActivityEntityType.TASK, task_id,
        old_status, status_data.status, performed_by=current_user.user_id
    )
    db.commit()
    db.refresh(task)
    return task


@router.delete("/{project_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = _get_task_or_404(db, project_id, task_id)

    record_event(
        db, project_id, ActivityEntityType.TASK, task_id,
        ActivityAction.DELETED,
        performed_by=current_user.user_id,
        metadata={"name": task.name}
    )
    db.delete(task)
    db.commit()
    return None
