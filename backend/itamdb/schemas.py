# backend/itamdb/schemas.py
"""
Shared pydantic bases.

The API speaks camelCase JSON (assetTag, minStock, createdAt, ...) while the
Python side keeps snake_case attribute names.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class SuccessResponse(APIModel):
    success: bool = True
