from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from itamdb.apps.accounts.models import User
from itamdb.database import get_read_db, get_write_db
from itamdb.schemas import SuccessResponse
from itamdb.security import get_current_active_user, require_admin

from . import models, schemas, services

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("", response_model=List[schemas.AssetRead])
def list_assets(
    search: Optional[str] = None,
    status: Optional[models.AssetStatusEnum] = None,
    type: Optional[models.AssetTypeEnum] = None,
    location: Optional[str] = None,
    db: Session = Depends(get_read_db),
    current_user: User = Depends(get_current_active_user),
):
    filters = schemas.AssetFilter(search=search, status=status, type=type, location=location)
    return services.list_assets(db, filters)


@router.get("/{asset_id}", response_model=schemas.AssetRead)
def get_asset(
    asset_id: int,
    db: Session = Depends(get_read_db),
    current_user: User = Depends(get_current_active_user),
):
    return services.get_asset(db, asset_id)


@router.post("", response_model=schemas.AssetRead, status_code=status.HTTP_201_CREATED)
def create_asset(
    payload: schemas.AssetCreate,
    db: Session = Depends(get_write_db),
    current_user: User = Depends(require_admin),
):
    return services.create_asset(
        db,
        payload=payload,
        actor_username=current_user.username,
        actor_user_id=current_user.id,
    )


@router.put("/{asset_id}", response_model=schemas.AssetRead)
def update_asset(
    asset_id: int,
    payload: schemas.AssetUpdate,
    db: Session = Depends(get_write_db),
    current_user: User = Depends(require_admin),
):
    return services.update_asset(
        db,
        asset_id=asset_id,
        payload=payload,
        actor_username=current_user.username,
        actor_user_id=current_user.id,
    )


@router.delete("/{asset_id}", response_model=SuccessResponse)
def delete_asset(
    asset_id: int,
    db: Session = Depends(get_write_db),
    current_user: User = Depends(require_admin),
):
    services.delete_asset(
        db,
        asset_id=asset_id,
        actor_username=current_user.username,
        actor_user_id=current_user.id,
    )
    return SuccessResponse()
