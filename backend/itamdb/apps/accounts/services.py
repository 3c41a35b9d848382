# backend/itamdb/apps/accounts/services.py

from __future__ import annotations

import logging
import os
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from itamdb.errors import Conflict
from itamdb.security import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    create_access_token,
    get_password_hash,
    verify_password,
)

from . import models

logger = logging.getLogger(__name__)

# (username env var, password env var, role)
BOOTSTRAP_ACCOUNTS = (
    ("ADMIN_USER", "ADMIN_PASS", models.AccountRole.ADMIN),
    ("USER_USER", "USER_PASS", models.AccountRole.USER),
)


class AuthenticationError(Exception):
    """Raised when login credentials are invalid or the account is inactive."""


def _normalise_username(value: str) -> str:
    return (value or "").strip().lower()


def get_user_by_username(db: Session, username: str) -> Optional[models.User]:
    return (
        db.query(models.User)
        .filter(models.User.username == _normalise_username(username))
        .first()
    )


def create_user(
    db: Session,
    *,
    username: str,
    password: str,
    role: models.AccountRole = models.AccountRole.USER,
) -> models.User:
    username = _normalise_username(username)
    if not username or not password:
        raise ValueError("username and password are required.")
    if get_user_by_username(db, username):
        raise Conflict(f"User {username!r} already exists.")
    user = models.User(
        username=username,
        role=role,
        hashed_password=get_password_hash(password),
        is_active=True,
    )
    db.add(user)
    db.flush()
    return user


def authenticate_user(db: Session, *, username: str, password: str) -> models.User:
    user = get_user_by_username(db, username)
    if not user or not user.is_active:
        raise AuthenticationError("Invalid credentials.")
    if not verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid credentials.")
    return user


def issue_access_token_for_user(user: models.User) -> Tuple[str, int]:
    """Returns (token_string, expires_in_seconds)."""
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": user.role.value if hasattr(user.role, "value") else str(user.role),
    }
    token = create_access_token(
        data=payload,
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return token, int(ACCESS_TOKEN_EXPIRE_MINUTES * 60)


def ensure_bootstrap_users(db: Session, environ: Optional[dict] = None) -> list[models.User]:
    """
    Create the ADMIN / USER accounts named in the environment if missing.

    Existing accounts are never modified, so rotating ADMIN_PASS after the
    first start has no effect on the stored hash.
    """
    environ = os.environ if environ is None else environ
    created: list[models.User] = []
    for user_var, pass_var, role in BOOTSTRAP_ACCOUNTS:
        username = _normalise_username(environ.get(user_var, ""))
        password = environ.get(pass_var, "")
        if not username or not password:
            continue
        if get_user_by_username(db, username):
            continue
        created.append(create_user(db, username=username, password=password, role=role))
        logger.info("Created bootstrap account", extra={"username": username, "role": role.value})
    db.commit()
    return created
