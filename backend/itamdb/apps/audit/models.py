from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Index, Integer, JSON, String, desc

from ...database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityType(str, enum.Enum):
    ASSET = "ASSET"
    INVENTORY = "INVENTORY"


class ActivityAction(str, enum.Enum):
    ASSET_CREATE = "ASSET_CREATE"
    ASSET_UPDATE = "ASSET_UPDATE"
    ASSET_DELETE = "ASSET_DELETE"
    ASSET_MOVE = "ASSET_MOVE"
    INVENTORY_CREATE = "INVENTORY_CREATE"
    INVENTORY_UPDATE = "INVENTORY_UPDATE"
    INVENTORY_DELETE = "INVENTORY_DELETE"
    INVENTORY_MOVE = "INVENTORY_MOVE"


class ActivityLog(Base):
    """
    Append-only audit trail for asset and inventory changes.

    Rows are written once and never updated or deleted. `entity_id` is not a
    foreign key: the history of a deleted record stays readable.
    """

    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_entity", "entity_type", "entity_id"),
        Index("ix_activity_logs_time_desc", desc("created_at"), desc("id")),
    )

    id = Column(Integer, primary_key=True, index=True)
    actor_username = Column(String(64), nullable=True, index=True)
    actor_user_id = Column(String(36), nullable=True, index=True)
    action = Column(
        Enum(ActivityAction, name="activity_action_enum", native_enum=False),
        nullable=False,
        index=True,
    )
    entity_type = Column(
        Enum(EntityType, name="activity_entity_type_enum", native_enum=False),
        nullable=False,
    )
    entity_id = Column(Integer, nullable=True)
    correlation_id = Column(String(36), nullable=True, index=True)
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<ActivityLog id={self.id} entity={self.entity_type}:{self.entity_id} action={self.action}>"
