from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from itamdb.schemas import APIModel

from .models import ActivityAction, EntityType

MAX_PAGE_SIZE = 500
DEFAULT_PAGE_SIZE = 50


class ActivityFilter(APIModel):
    actor: Optional[str] = None
    entity_type: Optional[EntityType] = None
    entity_id: Optional[int] = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class ActivityLogRead(APIModel):
    id: int
    actor_username: Optional[str] = None
    actor_user_id: Optional[str] = None
    action: ActivityAction
    entity_type: EntityType
    entity_id: Optional[int] = None
    correlation_id: Optional[str] = None
    meta: Optional[Any] = None
    created_at: datetime


class ActivityPage(APIModel):
    logs: List[ActivityLogRead]
