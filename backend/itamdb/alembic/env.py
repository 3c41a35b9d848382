# backend/itamdb/alembic/env.py

from __future__ import annotations

import os
import sys
from logging.config import fileConfig

from alembic import context

# __file__ = backend/itamdb/alembic/env.py, so backend/ must be importable.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from itamdb.database import Base, WRITE_DB_URL, write_engine  # noqa: E402

# Register every table on Base.metadata.
from itamdb.apps.accounts import models as accounts_models  # noqa: F401, E402
from itamdb.apps.assets import models as assets_models  # noqa: F401, E402
from itamdb.apps.inventory import models as inventory_models  # noqa: F401, E402
from itamdb.apps.audit import models as audit_models  # noqa: F401, E402

target_metadata = Base.metadata


def _offline_url() -> str:
    url = (config.get_main_option("sqlalchemy.url") or "").strip()
    if not url or url.startswith("driver://"):
        url = WRITE_DB_URL
    return url


def run_migrations_offline() -> None:
    """Render SQL without connecting to the database."""
    context.configure(
        url=_offline_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Migrate through the application's write engine."""
    with write_engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
