from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Enum as SAEnum, Index, Integer, String, Text

from itamdb.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssetTypeEnum(str, enum.Enum):
    LAPTOP = "LAPTOP"
    PC = "PC"
    SERVER = "SERVER"
    NETWORK = "NETWORK"
    PRINTER = "PRINTER"
    OTHER = "OTHER"


class AssetStatusEnum(str, enum.Enum):
    IN_USE = "IN_USE"
    IN_STOCK = "IN_STOCK"
    REPAIR = "REPAIR"
    RETIRED = "RETIRED"


class Asset(Base):
    __tablename__ = "assets"
    __table_args__ = (
        Index("ix_assets_status_type", "status", "type"),
        Index("ix_assets_updated_at", "updated_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    asset_tag = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(
        SAEnum(AssetTypeEnum, name="asset_type_enum", native_enum=False),
        nullable=False,
        default=AssetTypeEnum.OTHER,
    )
    brand = Column(String(128), nullable=True)
    model = Column(String(128), nullable=True)
    serial_number = Column(String(128), nullable=True, unique=True)
    status = Column(
        SAEnum(AssetStatusEnum, name="asset_status_enum", native_enum=False),
        nullable=False,
        default=AssetStatusEnum.IN_STOCK,
        index=True,
    )
    assigned_to = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True, index=True)
    purchase_date = Column(Date, nullable=True)
    warranty_end = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<Asset id={self.id} tag={self.asset_tag} status={self.status}>"
