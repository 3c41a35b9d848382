from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from itamdb.apps.assets import models as asset_models
from itamdb.apps.audit import services as audit_services
from itamdb.apps.audit.models import ActivityAction, EntityType
from itamdb.errors import (
    Conflict,
    InternalFailure,
    InvalidInput,
    InvalidState,
    NotFound,
    ServiceError,
    TransientFailure,
)
from itamdb.utils.identifiers import generate_uuid7

from . import models, schemas

logger = logging.getLogger(__name__)

INITIAL_STOCK_REF = "initial stock"


@dataclass(frozen=True)
class MovementOutcome:
    item: models.InventoryItem
    movement: models.InventoryMovement
    previous_stock: int
    new_stock: int


# ---------------------------------------------------------------------------
# Ledger arithmetic
# ---------------------------------------------------------------------------


def parse_movement_type(value: Union[str, models.MovementTypeEnum]) -> models.MovementTypeEnum:
    if isinstance(value, models.MovementTypeEnum):
        return value
    try:
        return models.MovementTypeEnum((value or "").strip().upper())
    except (ValueError, AttributeError):
        raise InvalidInput(f"Invalid movement type {value!r}; expected IN, OUT or ADJUST.")


def parse_quantity(value) -> int:
    """qty must be a finite whole number > 0 (also for ADJUST)."""
    if isinstance(value, bool):
        raise InvalidInput("qty must be a positive integer.")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise InvalidInput("qty must be a positive integer.")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidInput("qty must be a positive integer.")
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise InvalidInput("qty must be a positive integer.")
    return value


def compute_next_stock(current: int, movement_type: models.MovementTypeEnum, qty: int) -> int:
    if movement_type == models.MovementTypeEnum.IN:
        next_stock = current + qty
    elif movement_type == models.MovementTypeEnum.OUT:
        next_stock = current - qty
    else:
        next_stock = qty
    if next_stock < 0:
        raise InvalidState(
            f"Stock would be negative: {current} on hand, {movement_type.value} {qty} requested."
        )
    return next_stock


def replay_ledger(movements: Iterable[models.InventoryMovement], *, opening_stock: int = 0) -> int:
    """Stock implied by `movements` applied in creation order."""
    stock = opening_stock
    for movement in sorted(movements, key=lambda m: (m.created_at, m.id)):
        stock = compute_next_stock(stock, movement.type, movement.qty)
    return stock


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


def _normalise_sku(sku: str) -> str:
    return (sku or "").strip().upper()


def get_item(db: Session, item_id: int) -> models.InventoryItem:
    item = db.get(models.InventoryItem, item_id)
    if not item:
        raise NotFound("Inventory item not found.")
    return item


def list_items(db: Session, filters: schemas.InventoryFilter) -> Sequence[models.InventoryItem]:
    query = db.query(models.InventoryItem)
    if filters.search and filters.search.strip():
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(
            or_(
                models.InventoryItem.sku.ilike(pattern),
                models.InventoryItem.name.ilike(pattern),
            )
        )
    if filters.category:
        query = query.filter(models.InventoryItem.category == filters.category)
    if filters.location and filters.location.strip():
        query = query.filter(models.InventoryItem.location == filters.location.strip())
    if filters.low_stock:
        query = query.filter(models.InventoryItem.stock < models.InventoryItem.min_stock)
    return query.order_by(models.InventoryItem.sku.asc()).all()


def _ensure_unique_sku(db: Session, sku: str, *, exclude_id: Optional[int] = None) -> None:
    query = db.query(models.InventoryItem).filter(models.InventoryItem.sku == sku)
    if exclude_id is not None:
        query = query.filter(models.InventoryItem.id != exclude_id)
    if query.first():
        raise Conflict(f"SKU {sku} is already in use.")


def create_item(
    db: Session,
    *,
    payload: schemas.InventoryItemCreate,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
) -> models.InventoryItem:
    """
    Insert an item. A positive opening stock is booked as an IN movement in
    the same transaction so the ledger always explains `stock`.
    """
    data = payload.model_dump()
    data["sku"] = _normalise_sku(payload.sku)
    opening_stock = data.pop("stock")
    _ensure_unique_sku(db, data["sku"])

    item = models.InventoryItem(**data, stock=opening_stock)
    db.add(item)
    try:
        db.flush()
        if opening_stock > 0:
            db.add(
                models.InventoryMovement(
                    inventory_item_id=item.id,
                    type=models.MovementTypeEnum.IN,
                    qty=opening_stock,
                    ref=INITIAL_STOCK_REF,
                    created_by=actor_username,
                )
            )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(f"SKU {data['sku']} is already in use.") from exc
    db.refresh(item)

    audit_services.record(
        db,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
        action=ActivityAction.INVENTORY_CREATE,
        entity_type=EntityType.INVENTORY,
        entity_id=item.id,
        meta={"sku": item.sku, "name": item.name, "initialStock": opening_stock},
    )
    return item


def update_item(
    db: Session,
    *,
    item_id: int,
    payload: schemas.InventoryItemUpdate,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
) -> models.InventoryItem:
    item = get_item(db, item_id)
    data = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in {"location", "notes"}
    }
    if "sku" in data:
        data["sku"] = _normalise_sku(data["sku"])
        if data["sku"] != item.sku:
            _ensure_unique_sku(db, data["sku"], exclude_id=item.id)

    changes = {}
    for field, value in data.items():
        before = getattr(item, field)
        if before != value:
            changes[field] = {"from": before, "to": value}
            setattr(item, field, value)

    if not changes:
        return item

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("SKU is already in use.") from exc
    db.refresh(item)

    audit_services.record(
        db,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
        action=ActivityAction.INVENTORY_UPDATE,
        entity_type=EntityType.INVENTORY,
        entity_id=item.id,
        meta={"sku": item.sku, "changes": changes},
    )
    return item


def delete_item(
    db: Session,
    *,
    item_id: int,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
) -> None:
    """Delete an item; its movement history goes with it (ON DELETE CASCADE)."""
    item = get_item(db, item_id)
    snapshot = {"sku": item.sku, "name": item.name, "stock": item.stock}
    db.delete(item)
    db.commit()

    audit_services.record(
        db,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
        action=ActivityAction.INVENTORY_DELETE,
        entity_type=EntityType.INVENTORY,
        entity_id=item_id,
        meta=snapshot,
    )


# ---------------------------------------------------------------------------
# Movements
# ---------------------------------------------------------------------------


def _lock_item(db: Session, item_id: int) -> Optional[models.InventoryItem]:
    # populate_existing: the row read under the lock replaces any stale copy
    # already sitting in the identity map.
    return (
        db.query(models.InventoryItem)
        .filter(models.InventoryItem.id == item_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )


def apply_movement(
    db: Session,
    *,
    item_id: int,
    movement_type: Union[str, models.MovementTypeEnum],
    qty,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
    ref: Optional[str] = None,
    target_asset_id: Optional[int] = None,
) -> MovementOutcome:
    """
    Apply IN / OUT / ADJUST to one item.

    The item row is locked (SELECT ... FOR UPDATE) for the whole transaction,
    so concurrent movements on the same item run one after the other and each
    sees the stock committed by the previous one. The stock update and the
    movement row commit together or not at all. Activity entries are written
    after the commit and can never undo it.
    """
    movement_type = parse_movement_type(movement_type)
    quantity = parse_quantity(qty)
    ref = (ref or "").strip() or None

    try:
        target_asset = None
        if target_asset_id is not None:
            target_asset = db.get(asset_models.Asset, target_asset_id)
            if target_asset is None:
                raise NotFound("Target asset not found.")

        item = _lock_item(db, item_id)
        if item is None:
            raise NotFound("Inventory item not found.")

        previous_stock = item.stock
        new_stock = compute_next_stock(previous_stock, movement_type, quantity)

        item.stock = new_stock
        movement = models.InventoryMovement(
            inventory_item_id=item.id,
            type=movement_type,
            qty=quantity,
            ref=ref,
            created_by=actor_username,
            target_asset_id=target_asset.id if target_asset else None,
        )
        db.add(movement)
        db.flush()

        sku = item.sku
        item_name = item.name
        movement_id = movement.id
        asset_tag = target_asset.asset_tag if target_asset else None
        db.commit()
    except ServiceError:
        db.rollback()
        raise
    except OperationalError as exc:
        db.rollback()
        logger.warning(
            "Stock movement rolled back (transient)",
            extra={"item_id": item_id, "movement_type": movement_type.value},
        )
        raise TransientFailure("Stock movement could not be completed; retry the request.") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(
            "Stock movement rolled back",
            exc_info=True,
            extra={"item_id": item_id, "movement_type": movement_type.value},
        )
        raise InternalFailure("Stock movement failed.") from exc

    logger.info(
        "Stock movement applied",
        extra={
            "item_id": item_id,
            "movement_type": movement_type.value,
            "qty": quantity,
            "new_stock": new_stock,
        },
    )

    correlation_id = generate_uuid7() if target_asset_id is not None else None
    audit_services.record(
        db,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
        action=ActivityAction.INVENTORY_MOVE,
        entity_type=EntityType.INVENTORY,
        entity_id=item_id,
        correlation_id=correlation_id,
        meta={
            "movementId": movement_id,
            "sku": sku,
            "type": movement_type.value,
            "qty": quantity,
            "ref": ref,
            "actor": actor_username,
            "previousStock": previous_stock,
            "newStock": new_stock,
            "targetAssetId": target_asset_id,
        },
    )
    if target_asset_id is not None:
        audit_services.record(
            db,
            actor_username=actor_username,
            actor_user_id=actor_user_id,
            action=ActivityAction.ASSET_MOVE,
            entity_type=EntityType.ASSET,
            entity_id=target_asset_id,
            correlation_id=correlation_id,
            meta={
                "movementId": movement_id,
                "inventoryItemId": item_id,
                "sku": sku,
                "itemName": item_name,
                "assetTag": asset_tag,
                "type": movement_type.value,
                "qty": quantity,
                "ref": ref,
                "actor": actor_username,
            },
        )

    return MovementOutcome(
        item=item,
        movement=movement,
        previous_stock=previous_stock,
        new_stock=new_stock,
    )


def move_stock(
    db: Session,
    *,
    item_id: int,
    payload: schemas.MovementCreate,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
) -> models.InventoryItem:
    """Request-layer entry point: apply the movement and return the item snapshot."""
    outcome = apply_movement(
        db,
        item_id=item_id,
        movement_type=payload.type,
        qty=payload.qty,
        ref=payload.ref,
        target_asset_id=payload.target_asset_id,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
    )
    db.refresh(outcome.item)
    return outcome.item


def list_movements(
    db: Session,
    *,
    item_id: int,
    limit: int = 100,
    offset: int = 0,
) -> Sequence[models.InventoryMovement]:
    get_item(db, item_id)
    return (
        db.query(models.InventoryMovement)
        .filter(models.InventoryMovement.inventory_item_id == item_id)
        .order_by(models.InventoryMovement.created_at.desc(), models.InventoryMovement.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
