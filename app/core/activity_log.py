"""Activity log writer and reader.

Every mutating project endpoint records what it changed here, inside the same
session (and therefore the same transaction) as the mutation itself. The
writer functions only ``add`` and ``flush``; committing is left to the caller
so a failed audit insert rolls back the change it describes.

Diffing rules for ``record_field_changes``:

- Only keys present in the *new* snapshot are compared. A key that disappears
  from the new snapshot is never reported as a change, so callers that want
  removals recorded must put the key in the new snapshot with ``None``.
- Values are compared with ``!=``, not identity.
- No differing keys means no records. That is success, not an error.
"""
import enum
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.time import utc_now
from app.models.activity_log import ActivityLog, ActivityEntityType, ActivityAction

logger = logging.getLogger(__name__)

STATUS_FIELD = "status"

EntityTypeArg = Union[ActivityEntityType, str]
ActionArg = Union[ActivityAction, str]


def serialize_value(value: Any) -> Optional[str]:
    """Render an attribute value as the text stored in old_value/new_value."""
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, sort_keys=True, default=str, separators=(",", ":"))
    return str(value)


def extract_fields(obj: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Build a flat snapshot of ``fields`` from a mapping or an ORM object.

    Fields the source does not have are left out of the snapshot.
    """
    snapshot = {}
    for field in fields:
        if isinstance(obj, Mapping):
            if field in obj:
                snapshot[field] = obj[field]
        elif hasattr(obj, field):
            snapshot[field] = getattr(obj, field)
    return snapshot


def record_event(
    db: Session,
    project_id: int,
    entity_type: EntityTypeArg,
    entity_id: int,
    action: ActionArg,
    performed_by: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None,
    field_name: Optional[str] = None,
    old_value: Any = None,
    new_value: Any = None,
) -> ActivityLog:
    """Append one record to the activity log and flush it.

    Raises ValueError for an entity type or action outside the tracked sets.
    Storage errors from the flush propagate to the caller.
    """
    entity_type = ActivityEntityType(entity_type)
    action = ActivityAction(action)

    record = ActivityLog(
        project_id=project_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        field_name=field_name,
        old_value=serialize_value(old_value),
        new_value=serialize_value(new_value),
        performed_by=performed_by,
        performed_at=utc_now(),
        extra=metadata,
    )
    db.add(record)
    db.flush()
    logger.debug(
        "activity recorded project=%s %s:%s %s field=%s",
        project_id, entity_type.value, entity_id, action.value, field_name
    )
    return record


def record_field_changes(
    db: Session,
    project_id: int,
    entity_type: EntityTypeArg,
    entity_id: int,
    old_snapshot: Mapping[str, Any],
    new_snapshot: Mapping[str, Any],
    performed_by: Optional[int] = None,
) -> List[ActivityLog]:
    """Record one ``updated`` entry per key of ``new_snapshot`` whose value changed."""
    records = []
    for field, new_value in new_snapshot.items():
        old_value = old_snapshot.get(field)
        if old_value != new_value:
            records.append(record_event(
                db,
                project_id,
                entity_type,
                entity_id,
                ActivityAction.UPDATED,
                performed_by=performed_by,
                field_name=field,
                old_value=old_value,
                new_value=new_value,
            ))
    return records


def record_status_change(
    db: Session,
    project_id: int,
    entity_type: EntityTypeArg,
    entity_id: int,
    old_status: Any,
    new_status: Any,
    performed_by: Optional[int] = None,
) -> Optional[ActivityLog]:
    """Record a lifecycle status transition as a single ``status_changed`` entry.

    Returns None without writing anything when the status did not change.
    """
    old_text = serialize_value(old_status)
    new_text = serialize_value(new_status)
    if old_text == new_text:
        return None
    return record_event(
        db,
        project_id,
        entity_type,
        entity_id,
        ActivityAction.STATUS_CHANGED,
        performed_by=performed_by,
        metadata={"old_status": old_text, "new_status": new_text},
        field_name=STATUS_FIELD,
        old_value=old_text,
        new_value=new_text,
    )


def _ordered(query):
    return query.order_by(ActivityLog.performed_at.desc(), ActivityLog.log_id.desc())


def list_events(
    db: Session,
    project_id: int,
    entity_type: Optional[EntityTypeArg] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[ActivityLog], int]:
    """Return one page of a project's activity, newest first, with the total match count.

    An unknown project simply has no records.
    """
    query = db.query(ActivityLog).filter(ActivityLog.project_id == project_id)
    if entity_type is not None:
        query = query.filter(
            ActivityLog.entity_type == ActivityEntityType(entity_type).value)

    total = query.count()
    records = _ordered(query.options(joinedload(ActivityLog.performer))) \
        .offset(offset).limit(limit).all()
    return records, total


def list_events_for_entity(
    db: Session,
    entity_type: EntityTypeArg,
    entity_id: int,
) -> List[ActivityLog]:
    """Return the full history of one entity, newest first."""
    query = db.query(ActivityLog).options(joinedload(ActivityLog.performer)).filter(
        ActivityLog.entity_type == ActivityEntityType(entity_type).value,
        ActivityLog.entity_id == entity_id,
    )
    return _ordered(query).all()


def performer_name(record: ActivityLog) -> str:
    """Display name of whoever performed the change."""
    if record.performed_by is None or record.performer is None:
        return settings.SYSTEM_ACTOR_LABEL
    return record.performer.full_name
