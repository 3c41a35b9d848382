# backend/itamdb/apps/accounts/schemas.py

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from itamdb.schemas import APIModel

from .models import AccountRole


class LoginRequest(APIModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class UserRead(APIModel):
    id: str
    username: str
    role: AccountRole
    is_active: bool
    created_at: datetime


class Token(APIModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    username: str
    role: AccountRole
