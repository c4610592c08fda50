"""Activity log routes."""
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.rls import require_project_access, user_can_access_project
from app.core.activity_log import list_events, list_events_for_entity, performer_name
from app.models.user import User
from app.models.activity_log import ActivityLog, ActivityEntityType, ActivityAction
from app.schemas.activity_log import ActivityLogResponse, ActivityLogPage

# Mounted under /projects
project_router = APIRouter()
# Mounted under /activity-log
router = APIRouter()


def _build_log_response(log: ActivityLog) -> ActivityLogResponse:
    return ActivityLogResponse(
        log_id=log.log_id,
        project_id=log.project_id,
        entity_type=log.entity_type,
        entity_id=log.entity_id,
        action=log.action,
        field_name=log.field_name,
        old_value=log.old_value,
        new_value=log.new_value,
        performed_by=log.performed_by,
        performer_name=performer_name(log),
        performed_at=log.performed_at,
        metadata=log.extra,
    )


@project_router.get("/{project_id}/activity-log", response_model=ActivityLogPage)
def get_project_activity_log(
    entity_type: Optional[ActivityEntityType] = Query(None, description="Filter by entity type"),
    limit: int = Query(settings.ACTIVITY_LOG_DEFAULT_LIMIT, ge=1, le=settings.ACTIVITY_LOG_MAX_LIMIT,
                       description="Page size"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    project_id: int = Depends(require_project_access),
    db: Session = Depends(get_db)
):
    """Project activity feed, newest first.

    ``total`` counts every matching record regardless of paging.
    """
    logs, total = list_events(db, project_id, entity_type=entity_type, limit=limit, offset=offset)
    return ActivityLogPage(
        logs=[_build_log_response(log) for log in logs],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/entities/{entity_type}/{entity_id}", response_model=List[ActivityLogResponse])
def get_entity_history(
    entity_type: ActivityEntityType,
    entity_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Complete history of one entity, limited to projects the caller can access."""
    logs = list_events_for_entity(db, entity_type, entity_id)

    access: Dict[int, bool] = {}
    visible = []
    for log in logs:
        if log.project_id not in access:
            access[log.project_id] = user_can_access_project(db, current_user, log.project_id)
        if access[log.project_id]:
            visible.append(_build_log_response(log))
    return visible


@router.get("/entity-types", response_model=List[str])
def get_entity_types(current_user: User = Depends(get_current_user)):
    """Entity types accepted by the activity log filters."""
    return [t.value for t in ActivityEntityType]


@router.get("/actions", response_model=List[str])
def get_actions(current_user: User = Depends(get_current_user)):
    return [a.value for a in ActivityAction]
