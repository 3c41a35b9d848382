from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from itamdb.apps.accounts.models import User
from itamdb.database import get_read_db
from itamdb.security import get_current_active_user

from . import models, schemas, services


router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("", response_model=schemas.ActivityPage)
def list_activity(
    actor: Optional[str] = None,
    entity_type: Optional[models.EntityType] = Query(None, alias="entityType"),
    entity_id: Optional[int] = Query(None, alias="entityId"),
    limit: int = Query(schemas.DEFAULT_PAGE_SIZE, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_read_db),
    current_user: User = Depends(get_current_active_user),
):
    filters = schemas.ActivityFilter(
        actor=actor,
        entity_type=entity_type,
        entity_id=entity_id,
        limit=min(limit, schemas.MAX_PAGE_SIZE),
        offset=offset,
    )
    rows = services.list_activity(db, filters)
    return schemas.ActivityPage(logs=[schemas.ActivityLogRead.model_validate(row) for row in rows])
