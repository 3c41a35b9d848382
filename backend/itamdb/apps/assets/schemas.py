from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator

from itamdb.schemas import APIModel

from .models import AssetStatusEnum, AssetTypeEnum


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class AssetBase(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: AssetTypeEnum = AssetTypeEnum.OTHER
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    status: AssetStatusEnum = AssetStatusEnum.IN_STOCK
    assigned_to: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[date] = None
    warranty_end: Optional[date] = None
    notes: Optional[str] = None

    @field_validator(
        "brand",
        "model",
        "serial_number",
        "assigned_to",
        "location",
        "purchase_date",
        "warranty_end",
        "notes",
        mode="before",
    )
    @classmethod
    def _empty_strings_are_null(cls, value):
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value


class AssetCreate(AssetBase):
    asset_tag: str = Field(..., min_length=1, max_length=64)


class AssetUpdate(APIModel):
    asset_tag: Optional[str] = Field(default=None, min_length=1, max_length=64)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[AssetTypeEnum] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    status: Optional[AssetStatusEnum] = None
    assigned_to: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[date] = None
    warranty_end: Optional[date] = None
    notes: Optional[str] = None

    @field_validator(
        "brand",
        "model",
        "serial_number",
        "assigned_to",
        "location",
        "purchase_date",
        "warranty_end",
        "notes",
        mode="before",
    )
    @classmethod
    def _empty_strings_are_null(cls, value):
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value


class AssetRead(AssetBase):
    id: int
    asset_tag: str
    created_at: datetime
    updated_at: datetime


class AssetFilter(APIModel):
    search: Optional[str] = None
    status: Optional[AssetStatusEnum] = None
    type: Optional[AssetTypeEnum] = None
    location: Optional[str] = None
