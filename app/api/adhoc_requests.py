"""Ad-hoc request routes."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload, selectinload
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.time import today_utc, utc_now
from app.models.user import User
from app.models.project import Project
from app.models.adhoc_request import (
    AdHocRequest,
    AdHocRequestComment,
    RequestPriority,
    RequestStatus,
    CLOSED_STATUSES,
)
from app.schemas.adhoc_request import (
    AdHocRequestCreate,
    AdHocRequestUpdate,
    AdHocRequestResponse,
    AdHocRequestStats,
    RequestCommentCreate,
    RequestCommentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Urgent first; enum declaration order is the ranking
PRIORITY_RANK = case(
    {priority.value: rank for rank, priority in enumerate(RequestPriority)},
    value=AdHocRequest.priority,
    else_=len(RequestPriority),
)


def _request_query(db: Session):
    return db.query(AdHocRequest).options(
        joinedload(AdHocRequest.assignee),
        joinedload(AdHocRequest.project),
        selectinload(AdHocRequest.comments),
    )


def _get_request_or_404(db: Session, request_id: int) -> AdHocRequest:
    request = _request_query(db).filter(AdHocRequest.request_id == request_id).first()
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Request not found"
        )
    return request


def _validate_references(db: Session, data: dict) -> None:
    assigned_to = data.get("assigned_to")
    if assigned_to is not None:
        if not db.query(User).filter(User.user_id == assigned_to).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Assignee not found"
            )
    project_id = data.get("project_id")
    if project_id is not None:
        if not db.query(Project).filter(Project.project_id == project_id).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Project not found"
            )


@router.get("/stats", response_model=AdHocRequestStats)
def get_request_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Counts by status and priority, plus open requests past their due date."""
    by_status = {s.value: 0 for s in RequestStatus}
    for value, count in db.query(
        AdHocRequest.status, func.count(AdHocRequest.request_id)
    ).group_by(AdHocRequest.status).all():
        by_status[value] = count

    by_priority = {p.value: 0 for p in RequestPriority}
    for value, count in db.query(
        AdHocRequest.priority, func.count(AdHocRequest.request_id)
    ).group_by(AdHocRequest.priority).all():
        by_priority[value] = count

    overdue = db.query(func.count(AdHocRequest.request_id)).filter(
        AdHocRequest.due_date < today_utc(),
        AdHocRequest.status.not_in(CLOSED_STATUSES)
    ).scalar()

    return AdHocRequestStats(
        total=sum(by_status.values()),
        by_status=by_status,
        by_priority=by_priority,
        overdue=overdue,
    )


@router.get("/", response_model=List[AdHocRequestResponse])
def list_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status", description="Filter by status"),
    assigned_to: Optional[int] = Query(None, description="Filter by assignee user id"),
    requestor: Optional[str] = Query(None, description="Case-insensitive match on requestor name"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List requests: most urgent first, then earliest due date, then newest."""
    query = _request_query(db)
    if status_filter:
        query = query.filter(AdHocRequest.status == status_filter.value)
    if assigned_to is not None:
        query = query.filter(AdHocRequest.assigned_to == assigned_to)
    if requestor:
        query = query.filter(AdHocRequest.requestor_name.ilike(f"%{requestor}%"))

    return query.order_by(
        PRIORITY_RANK,
        AdHocRequest.due_date.is_(None),
        AdHocRequest.due_date,
        AdHocRequest.created_at.desc(),
        AdHocRequest.request_id.desc(),
    ).all()


@router.post("/", response_model=AdHocRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    request_data: AdHocRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    data = request_data.model_dump()
    _validate_references(db, data)

    request = AdHocRequest(**data)
    if request.status == RequestStatus.COMPLETED.value:
        request.completed_at = utc_now()
    db.add(request)
    db.commit()
    return _get_request_or_404(db, request.request_id)


@router.get("/{request_id}", response_model=AdHocRequestResponse)
def get_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _get_request_or_404(db, request_id)


@router.patch("/{request_id}", response_model=AdHocRequestResponse)
def update_request(
    request_id: int,
    request_data: AdHocRequestUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a request. Completing it stamps ``completed_at``; reopening clears it."""
    request = _get_request_or_404(db, request_id)

    update_data = request_data.model_dump(exclude_unset=True)
    _validate_references(db, update_data)

    new_status = update_data.get("status")
    if new_status == RequestStatus.COMPLETED.value:
        if request.status != RequestStatus.COMPLETED.value:
            request.completed_at = utc_now()
    elif new_status is not None:
        request.completed_at = None

    for field, value in update_data.items():
        setattr(request, field, value)

    db.commit()
    return _get_request_or_404(db, request_id)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    request = _get_request_or_404(db, request_id)
    db.delete(request)
    db.commit()
    logger.info("ad-hoc request %s deleted by user %s", request_id, current_user.user_id)
    return None


# =============================================================================
# Comments
# =============================================================================

@router.get("/{request_id}/comments", response_model=List[RequestCommentResponse])
def list_comments(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Comments on a request, oldest first."""
    _get_request_or_404(db, request_id)
    return db.query(AdHocRequestComment).options(
        joinedload(AdHocRequestComment.user)
    ).filter(
        AdHocRequestComment.request_id == request_id
    ).order_by(AdHocRequestComment.created_at, AdHocRequestComment.comment_id).all()


@router.post("/{request_id}/comments", response_model=RequestCommentResponse,
             status_code=status.HTTP_201_CREATED)
def add_comment(
    request_id: int,
    comment_data: RequestCommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    _get_request_or_404(db, request_id)
    comment = AdHocRequestComment(
        request_id=request_id,
        user_id=current_user.user_id,
        comment=comment_data.comment,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment
