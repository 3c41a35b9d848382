from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parent
sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_WRITE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["SQLITE_BUSY_TIMEOUT_SEC"] = "5"

from itamdb.database import Base, build_engine  # noqa: E402
from itamdb.apps.accounts import models as account_models  # noqa: E402
from itamdb.apps.assets import models as asset_models  # noqa: E402
from itamdb.apps.inventory import models as inventory_models  # noqa: E402
from itamdb.apps.audit import models as audit_models  # noqa: E402

LEDGER_TABLES = [
    account_models.User.__table__,
    asset_models.Asset.__table__,
    inventory_models.InventoryItem.__table__,
    inventory_models.InventoryMovement.__table__,
    audit_models.ActivityLog.__table__,
]


@pytest.fixture()
def db_session():
    engine = build_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine, tables=LEDGER_TABLES)
    TestingSession = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
