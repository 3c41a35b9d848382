from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from itamdb.apps.accounts.models import User
from itamdb.database import get_read_db
from itamdb.security import get_current_active_user

from . import schemas, services

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=schemas.DashboardSummary)
def dashboard_summary(
    db: Session = Depends(get_read_db),
    current_user: User = Depends(get_current_active_user),
):
    return services.get_summary(db)
