from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from itamdb.apps.accounts.models import User
from itamdb.database import get_read_db, get_write_db
from itamdb.schemas import SuccessResponse
from itamdb.security import get_current_active_user, require_admin

from . import models, schemas, services

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("", response_model=List[schemas.InventoryItemRead])
def list_inventory(
    search: Optional[str] = None,
    category: Optional[models.InventoryCategoryEnum] = None,
    location: Optional[str] = None,
    low_stock: Optional[bool] = Query(None, alias="lowStock"),
    db: Session = Depends(get_read_db),
    current_user: User = Depends(get_current_active_user),
):
    filters = schemas.InventoryFilter(
        search=search,
        category=category,
        location=location,
        low_stock=low_stock,
    )
    return services.list_items(db, filters)


@router.get("/{item_id}", response_model=schemas.InventoryItemRead)
def get_inventory_item(
    item_id: int,
    db: Session = Depends(get_read_db),
    current_user: User = Depends(get_current_active_user),
):
    return services.get_item(db, item_id)


@router.post("", response_model=schemas.InventoryItemRead, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    payload: schemas.InventoryItemCreate,
    db: Session = Depends(get_write_db),
    current_user: User = Depends(require_admin),
):
    return services.create_item(
        db,
        payload=payload,
        actor_username=current_user.username,
        actor_user_id=current_user.id,
    )


@router.put("/{item_id}", response_model=schemas.InventoryItemRead)
def update_inventory_item(
    item_id: int,
    payload: schemas.InventoryItemUpdate,
    db: Session = Depends(get_write_db),
    current_user: User = Depends(require_admin),
):
    return services.update_item(
        db,
        item_id=item_id,
        payload=payload,
        actor_username=current_user.username,
        actor_user_id=current_user.id,
    )


@router.delete("/{item_id}", response_model=SuccessResponse)
def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_write_db),
    current_user: User = Depends(require_admin),
):
    services.delete_item(
        db,
        item_id=item_id,
        actor_username=current_user.username,
        actor_user_id=current_user.id,
    )
    return SuccessResponse()


@router.post("/{item_id}/move", response_model=schemas.InventoryItemRead)
def move_inventory(
    item_id: int,
    payload: schemas.MovementCreate,
    db: Session = Depends(get_write_db),
    current_user: User = Depends(require_admin),
):
    return services.move_stock(
        db,
        item_id=item_id,
        payload=payload,
        actor_username=current_user.username,
        actor_user_id=current_user.id,
    )


@router.get("/{item_id}/movements", response_model=schemas.MovementPage)
def list_inventory_movements(
    item_id: int,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_read_db),
    current_user: User = Depends(get_current_active_user),
):
    rows = services.list_movements(db, item_id=item_id, limit=limit, offset=offset)
    return schemas.MovementPage(movements=[schemas.MovementRead.model_validate(row) for row in rows])
