from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas

logger = logging.getLogger(__name__)


class AuditWriteFailure(Exception):
    """An activity row could not be persisted. Never leaves this module."""


def _write(db: Session, entry: models.ActivityLog) -> models.ActivityLog:
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise AuditWriteFailure(str(exc)) from exc
    return entry


def record(
    db: Session,
    *,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
    action: Union[models.ActivityAction, str],
    entity_type: Union[models.EntityType, str],
    entity_id: Optional[int],
    meta: Optional[Any] = None,
    correlation_id: Optional[str] = None,
) -> Optional[models.ActivityLog]:
    """
    Best-effort activity logger.

    Call only after the causal change has been committed: this commits its
    own transaction on `db`, and on any failure it rolls back, logs a warning
    and returns None instead of raising.
    """
    try:
        entry = models.ActivityLog(
            actor_username=actor_username,
            actor_user_id=actor_user_id,
            action=models.ActivityAction(action),
            entity_type=models.EntityType(entity_type),
            entity_id=entity_id,
            correlation_id=correlation_id,
            meta=jsonable_encoder(meta) if meta is not None else None,
        )
        return _write(db, entry)
    except Exception:
        logger.warning(
            "Failed to record activity",
            exc_info=True,
            extra={
                "actor_username": actor_username,
                "action": str(action),
                "entity_type": str(entity_type),
                "entity_id": entity_id,
            },
        )
        return None


def list_activity(db: Session, filters: schemas.ActivityFilter) -> Sequence[models.ActivityLog]:
    query = db.query(models.ActivityLog)
    if filters.actor:
        query = query.filter(models.ActivityLog.actor_username == filters.actor.strip())
    if filters.entity_type:
        query = query.filter(models.ActivityLog.entity_type == filters.entity_type)
    if filters.entity_id is not None:
        query = query.filter(models.ActivityLog.entity_id == filters.entity_id)
    return (
        query.order_by(models.ActivityLog.created_at.desc(), models.ActivityLog.id.desc())
        .offset(filters.offset)
        .limit(filters.limit)
        .all()
    )
