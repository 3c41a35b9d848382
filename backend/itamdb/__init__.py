# backend/itamdb/__init__.py
"""
IT asset and inventory ledger.

Import ORM models from each app so that Alembic and
Base.metadata.create_all() see all tables.
"""

from .apps.accounts import models as accounts_models      # users / roles
from .apps.assets import models as assets_models          # tracked hardware
from .apps.inventory import models as inventory_models    # stock items + movement ledger
from .apps.audit import models as audit_models            # activity log

__all__ = [
    "accounts_models",
    "assets_models",
    "inventory_models",
    "audit_models",
]
