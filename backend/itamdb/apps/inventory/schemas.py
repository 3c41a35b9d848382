from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from itamdb.schemas import APIModel

from .models import InventoryCategoryEnum, MovementTypeEnum


def _strip_or_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class InventoryItemBase(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: InventoryCategoryEnum = InventoryCategoryEnum.OTHER
    unit: str = Field(default="pcs", min_length=1, max_length=16)
    location: Optional[str] = None
    min_stock: int = Field(default=0, ge=0)
    notes: Optional[str] = None

    @field_validator("location", "notes", mode="before")
    @classmethod
    def _blank_is_null(cls, value):
        return _strip_or_none(value)


class InventoryItemCreate(InventoryItemBase):
    sku: str = Field(..., min_length=1, max_length=64)
    stock: int = Field(default=0, ge=0)


class InventoryItemUpdate(APIModel):
    """Stock is deliberately absent: it only changes through movements."""

    sku: Optional[str] = Field(default=None, min_length=1, max_length=64)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[InventoryCategoryEnum] = None
    unit: Optional[str] = Field(default=None, min_length=1, max_length=16)
    location: Optional[str] = None
    min_stock: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("location", "notes", mode="before")
    @classmethod
    def _blank_is_null(cls, value):
        return _strip_or_none(value)


class InventoryItemRead(InventoryItemBase):
    id: int
    sku: str
    stock: int
    is_low_stock: bool = False
    created_at: datetime
    updated_at: datetime


class InventoryFilter(APIModel):
    search: Optional[str] = None
    category: Optional[InventoryCategoryEnum] = None
    location: Optional[str] = None
    low_stock: Optional[bool] = None


class MovementCreate(APIModel):
    """
    Body of POST /api/inventory/{id}/move.

    `type` and `qty` are validated by the ledger service rather than here so
    a bad value is reported as a 400 with a specific message. `qty` is taken
    as sent: no coercion, so JSON `true` reaches the service as a bool.
    """

    type: str
    qty: Any
    ref: Optional[str] = Field(default=None, max_length=255)
    target_asset_id: Optional[int] = None

    @field_validator("ref", mode="before")
    @classmethod
    def _blank_ref_is_null(cls, value):
        return _strip_or_none(value)


class MovementRead(APIModel):
    id: int
    inventory_item_id: int
    type: MovementTypeEnum
    qty: int
    ref: Optional[str] = None
    created_by: Optional[str] = None
    target_asset_id: Optional[int] = None
    target_asset_tag: Optional[str] = None
    target_asset_name: Optional[str] = None
    created_at: datetime


class MovementPage(APIModel):
    movements: List[MovementRead]
