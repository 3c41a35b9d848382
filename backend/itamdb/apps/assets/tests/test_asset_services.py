from __future__ import annotations

from datetime import date

import pytest

from itamdb.apps.assets import models as asset_models
from itamdb.apps.assets import schemas as asset_schemas
from itamdb.apps.assets import services as asset_services
from itamdb.apps.audit import models as audit_models
from itamdb.apps.inventory import models as inventory_models
from itamdb.apps.inventory import schemas as inventory_schemas
from itamdb.apps.inventory import services as inventory_services
from itamdb.errors import Conflict, NotFound


def _create_asset(db, tag="LT-0100", **overrides):
    fields = {
        "asset_tag": tag,
        "name": "ThinkPad T14",
        "type": asset_models.AssetTypeEnum.LAPTOP,
        "brand": "Lenovo",
        "serial_number": f"SN-{tag}",
        "location": "HQ",
    }
    fields.update(overrides)
    return asset_services.create_asset(
        db,
        payload=asset_schemas.AssetCreate(**fields),
        actor_username="admin",
    )


def _asset_logs(db, asset_id):
    return (
        db.query(audit_models.ActivityLog)
        .filter(
            audit_models.ActivityLog.entity_type == audit_models.EntityType.ASSET,
            audit_models.ActivityLog.entity_id == asset_id,
        )
        .order_by(audit_models.ActivityLog.id.asc())
        .all()
    )


def test_create_asset_defaults_and_activity(db_session):
    asset = _create_asset(db_session, tag="  LT-0100 ", notes="   ", purchase_date="")

    assert asset.asset_tag == "LT-0100"
    assert asset.status == asset_models.AssetStatusEnum.IN_STOCK
    assert asset.notes is None
    assert asset.purchase_date is None
    logs = _asset_logs(db_session, asset.id)
    assert [log.action for log in logs] == [audit_models.ActivityAction.ASSET_CREATE]
    assert logs[0].meta["assetTag"] == "LT-0100"


def test_duplicate_tag_or_serial_is_conflict(db_session):
    _create_asset(db_session, tag="LT-0100", serial_number="SN-1")

    with pytest.raises(Conflict):
        _create_asset(db_session, tag="LT-0100", serial_number="SN-2")
    with pytest.raises(Conflict):
        _create_asset(db_session, tag="LT-0101", serial_number="SN-1")


def test_update_asset_records_diff(db_session):
    asset = _create_asset(db_session)

    updated = asset_services.update_asset(
        db_session,
        asset_id=asset.id,
        payload=asset_schemas.AssetUpdate.model_validate(
            {"status": "IN_USE", "assignedTo": "j.doe", "warrantyEnd": "2027-03-31"}
        ),
        actor_username="admin",
    )

    assert updated.status == asset_models.AssetStatusEnum.IN_USE
    assert updated.assigned_to == "j.doe"
    assert updated.warranty_end == date(2027, 3, 31)
    update_log = _asset_logs(db_session, asset.id)[-1]
    assert update_log.action == audit_models.ActivityAction.ASSET_UPDATE
    assert update_log.meta["changes"]["status"] == {"from": "IN_STOCK", "to": "IN_USE"}
    assert update_log.meta["changes"]["warranty_end"]["to"] == "2027-03-31"


def test_update_to_taken_tag_is_conflict(db_session):
    _create_asset(db_session, tag="LT-0001")
    other = _create_asset(db_session, tag="LT-0002")

    with pytest.raises(Conflict):
        asset_services.update_asset(
            db_session,
            asset_id=other.id,
            payload=asset_schemas.AssetUpdate(asset_tag="LT-0001"),
            actor_username="admin",
        )


def test_missing_asset_is_not_found(db_session):
    with pytest.raises(NotFound):
        asset_services.get_asset(db_session, 404)
    with pytest.raises(NotFound):
        asset_services.delete_asset(db_session, asset_id=404, actor_username="admin")


def test_list_assets_search_and_filters(db_session):
    _create_asset(db_session, tag="LT-0001", assigned_to="alice")
    _create_asset(
        db_session,
        tag="SRV-0001",
        name="Build server",
        type=asset_models.AssetTypeEnum.SERVER,
        status=asset_models.AssetStatusEnum.REPAIR,
        location="DC1",
    )

    by_person = asset_services.list_assets(db_session, asset_schemas.AssetFilter(search="ALICE"))
    in_repair = asset_services.list_assets(
        db_session, asset_schemas.AssetFilter(status=asset_models.AssetStatusEnum.REPAIR)
    )
    servers_in_dc1 = asset_services.list_assets(
        db_session,
        asset_schemas.AssetFilter(type=asset_models.AssetTypeEnum.SERVER, location="DC1"),
    )

    assert [a.asset_tag for a in by_person] == ["LT-0001"]
    assert [a.asset_tag for a in in_repair] == ["SRV-0001"]
    assert [a.asset_tag for a in servers_in_dc1] == ["SRV-0001"]


def test_delete_asset_keeps_movement_history(db_session):
    asset = _create_asset(db_session)
    item = inventory_services.create_item(
        db_session,
        payload=inventory_schemas.InventoryItemCreate(sku="RAM-8G", name="8GB DIMM", stock=4),
        actor_username="admin",
    )
    outcome = inventory_services.apply_movement(
        db_session,
        item_id=item.id,
        movement_type="OUT",
        qty=2,
        target_asset_id=asset.id,
        actor_username="admin",
    )

    asset_services.delete_asset(db_session, asset_id=asset.id, actor_username="admin")

    db_session.expire_all()
    movement = db_session.get(inventory_models.InventoryMovement, outcome.movement.id)
    assert movement is not None
    assert movement.target_asset_id is None
    assert movement.target_asset_tag is None
    actions = [log.action for log in _asset_logs(db_session, asset.id)]
    assert actions == [
        audit_models.ActivityAction.ASSET_CREATE,
        audit_models.ActivityAction.ASSET_MOVE,
        audit_models.ActivityAction.ASSET_DELETE,
    ]
