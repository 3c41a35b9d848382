# backend/itamdb/apps/accounts/__init__.py
"""
Accounts app

Responsible for:
- User accounts and their ADMIN / USER role
- Password login and JWT issue
- Bootstrap accounts configured through the environment

Other apps depend on `itamdb.security` for "who is calling" and
"may they change things".
"""

from . import models, schemas, services  # noqa: F401

__all__ = ["models", "schemas", "services"]
