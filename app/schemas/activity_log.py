"""Activity log schemas."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class ActivityLogResponse(BaseModel):
    log_id: int
    project_id: int
    entity_type: str
    entity_id: int
    action: str
    field_name: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    performed_by: Optional[int] = None
    performer_name: str  # "System" when performed_by is null
    performed_at: datetime
    metadata: Optional[Dict[str, Any]] = None


class ActivityLogPage(BaseModel):
    """One page of a project's activity feed."""
    logs: List[ActivityLogResponse]
    total: int
    limit: int
    offset: int
