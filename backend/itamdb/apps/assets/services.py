from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from itamdb.apps.audit import services as audit_services
from itamdb.apps.audit.models import ActivityAction, EntityType
from itamdb.errors import Conflict, NotFound

from . import models, schemas


def _normalise_tag(asset_tag: str) -> str:
    return (asset_tag or "").strip()


def get_asset(db: Session, asset_id: int) -> models.Asset:
    asset = db.get(models.Asset, asset_id)
    if not asset:
        raise NotFound("Asset not found.")
    return asset


def list_assets(db: Session, filters: schemas.AssetFilter) -> Sequence[models.Asset]:
    query = db.query(models.Asset)
    if filters.search and filters.search.strip():
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(
            or_(
                models.Asset.asset_tag.ilike(pattern),
                models.Asset.name.ilike(pattern),
                models.Asset.serial_number.ilike(pattern),
                models.Asset.assigned_to.ilike(pattern),
                models.Asset.brand.ilike(pattern),
                models.Asset.model.ilike(pattern),
            )
        )
    if filters.status:
        query = query.filter(models.Asset.status == filters.status)
    if filters.type:
        query = query.filter(models.Asset.type == filters.type)
    if filters.location and filters.location.strip():
        query = query.filter(models.Asset.location == filters.location.strip())
    return query.order_by(models.Asset.updated_at.desc(), models.Asset.id.desc()).all()


def _ensure_unique(
    db: Session,
    *,
    asset_tag: Optional[str],
    serial_number: Optional[str],
    exclude_id: Optional[int] = None,
) -> None:
    if asset_tag:
        query = db.query(models.Asset).filter(models.Asset.asset_tag == asset_tag)
        if exclude_id is not None:
            query = query.filter(models.Asset.id != exclude_id)
        if query.first():
            raise Conflict(f"Asset tag {asset_tag} is already in use.")
    if serial_number:
        query = db.query(models.Asset).filter(models.Asset.serial_number == serial_number)
        if exclude_id is not None:
            query = query.filter(models.Asset.id != exclude_id)
        if query.first():
            raise Conflict(f"Serial number {serial_number} is already in use.")


def _commit_or_conflict(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Asset tag or serial number is already in use.") from exc


def create_asset(
    db: Session,
    *,
    payload: schemas.AssetCreate,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
) -> models.Asset:
    data = payload.model_dump()
    data["asset_tag"] = _normalise_tag(payload.asset_tag)
    _ensure_unique(db, asset_tag=data["asset_tag"], serial_number=data.get("serial_number"))

    asset = models.Asset(**data)
    db.add(asset)
    _commit_or_conflict(db)
    db.refresh(asset)

    audit_services.record(
        db,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
        action=ActivityAction.ASSET_CREATE,
        entity_type=EntityType.ASSET,
        entity_id=asset.id,
        meta={"assetTag": asset.asset_tag, "name": asset.name, "status": asset.status.value},
    )
    return asset


def update_asset(
    db: Session,
    *,
    asset_id: int,
    payload: schemas.AssetUpdate,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
) -> models.Asset:
    asset = get_asset(db, asset_id)
    data = payload.model_dump(exclude_unset=True)
    if "asset_tag" in data:
        if data["asset_tag"] is None:
            del data["asset_tag"]
        else:
            data["asset_tag"] = _normalise_tag(data["asset_tag"])
    for required in ("name", "type", "status"):
        if required in data and data[required] is None:
            del data[required]

    new_tag = data.get("asset_tag")
    new_serial = data.get("serial_number")
    _ensure_unique(
        db,
        asset_tag=new_tag if new_tag != asset.asset_tag else None,
        serial_number=new_serial if new_serial != asset.serial_number else None,
        exclude_id=asset.id,
    )

    changes = {}
    for field, value in data.items():
        before = getattr(asset, field)
        if before != value:
            changes[field] = {"from": before, "to": value}
            setattr(asset, field, value)

    if not changes:
        return asset

    _commit_or_conflict(db)
    db.refresh(asset)

    audit_services.record(
        db,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
        action=ActivityAction.ASSET_UPDATE,
        entity_type=EntityType.ASSET,
        entity_id=asset.id,
        meta={"assetTag": asset.asset_tag, "changes": changes},
    )
    return asset


def delete_asset(
    db: Session,
    *,
    asset_id: int,
    actor_username: Optional[str],
    actor_user_id: Optional[str] = None,
) -> None:
    asset = get_asset(db, asset_id)
    snapshot = {"assetTag": asset.asset_tag, "name": asset.name}
    db.delete(asset)
    db.commit()

    audit_services.record(
        db,
        actor_username=actor_username,
        actor_user_id=actor_user_id,
        action=ActivityAction.ASSET_DELETE,
        entity_type=EntityType.ASSET,
        entity_id=asset_id,
        meta=snapshot,
    )
