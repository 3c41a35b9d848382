# backend/itamdb/main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .database import SessionLocal, dispose_engines

from .apps.accounts import services as account_services
from .apps.accounts.router import router as accounts_router
from .apps.assets.router import router as assets_router
from .apps.inventory.router import router as inventory_router
from .apps.audit.router import router as activity_router
from .apps.dashboard.router import router as dashboard_router

logger = logging.getLogger(__name__)


def _allowed_origins() -> List[str]:
    """
    Parse CORS_ALLOWED_ORIGINS from env.

    Accepts comma-separated origins. If unset, defaults to local dev ports.
    """
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
        "http://localhost:3000",
    ]


def _bootstrap_accounts() -> None:
    db = SessionLocal()
    try:
        account_services.ensure_bootstrap_users(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _bootstrap_accounts()
    yield
    dispose_engines()
    logger.info("Database engines disposed")


app = FastAPI(title="IT Asset Ledger API", version="1.0.0", lifespan=lifespan)
cors_origins = _allowed_origins()
allow_credentials = "*" not in cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


app.include_router(accounts_router)
app.include_router(assets_router)
app.include_router(inventory_router)
app.include_router(activity_router)
app.include_router(dashboard_router)
