from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from itamdb.apps.assets import models as asset_models  # noqa: F401  (registers "Asset" for the movement link)
from itamdb.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryCategoryEnum(str, enum.Enum):
    STORAGE = "STORAGE"
    MEMORY = "MEMORY"
    NETWORK = "NETWORK"
    PERIPHERAL = "PERIPHERAL"
    OTHER = "OTHER"


class MovementTypeEnum(str, enum.Enum):
    IN = "IN"          # adds qty
    OUT = "OUT"        # subtracts qty
    ADJUST = "ADJUST"  # sets stock to qty


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_inventory_items_stock_non_negative"),
        CheckConstraint("min_stock >= 0", name="ck_inventory_items_min_stock_non_negative"),
        Index("ix_inventory_items_category_location", "category", "location"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(
        SAEnum(InventoryCategoryEnum, name="inventory_category_enum", native_enum=False),
        nullable=False,
        default=InventoryCategoryEnum.OTHER,
    )
    unit = Column(String(16), nullable=False, default="pcs")
    location = Column(String(255), nullable=True, index=True)
    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    movements = relationship(
        "InventoryMovement",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_low_stock(self) -> bool:
        return (self.stock or 0) < (self.min_stock or 0)

    def __repr__(self) -> str:
        return f"<InventoryItem id={self.id} sku={self.sku} stock={self.stock}>"


class InventoryMovement(Base):
    """
    Immutable ledger row. Written only by `services.apply_movement`.
    """

    __tablename__ = "inventory_movements"
    __table_args__ = (
        CheckConstraint("qty > 0", name="ck_inventory_movements_qty_positive"),
        Index("ix_inventory_movements_item_time", "inventory_item_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    inventory_item_id = Column(
        Integer,
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(
        SAEnum(MovementTypeEnum, name="inventory_movement_type_enum", native_enum=False),
        nullable=False,
    )
    qty = Column(Integer, nullable=False)
    ref = Column(String(255), nullable=True)
    created_by = Column(String(64), nullable=True)
    target_asset_id = Column(
        Integer,
        ForeignKey("assets.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    item = relationship("InventoryItem", back_populates="movements")
    target_asset = relationship("Asset", lazy="joined")

    @property
    def target_asset_tag(self):
        return self.target_asset.asset_tag if self.target_asset else None

    @property
    def target_asset_name(self):
        return self.target_asset.name if self.target_asset else None
