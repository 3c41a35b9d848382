from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from itamdb.apps.assets import models as asset_models
from itamdb.apps.assets.schemas import AssetRead
from itamdb.apps.inventory import models as inventory_models
from itamdb.apps.inventory.schemas import InventoryItemRead

from . import schemas

RECENT_ASSETS_LIMIT = 5
LOW_STOCK_LIST_LIMIT = 10
UNASSIGNED_LOCATION = "Unassigned"


def get_summary(db: Session) -> schemas.DashboardSummary:
    Asset = asset_models.Asset
    Item = inventory_models.InventoryItem

    status_counts = dict(
        db.query(Asset.status, func.count(Asset.id)).group_by(Asset.status).all()
    )
    assets_by_status = [
        schemas.NamedValue(name=status.value, value=int(status_counts.get(status, 0)))
        for status in asset_models.AssetStatusEnum
    ]
    total_assets = sum(entry.value for entry in assets_by_status)

    total_inventory_qty = db.query(func.coalesce(func.sum(Item.stock), 0)).scalar() or 0
    low_stock_filter = Item.stock < Item.min_stock
    low_stock_items = db.query(func.count(Item.id)).filter(low_stock_filter).scalar() or 0

    location_totals: dict[str, int] = {}
    for location, qty in (
        db.query(Item.location, func.coalesce(func.sum(Item.stock), 0))
        .group_by(Item.location)
        .all()
    ):
        name = (location or "").strip() or UNASSIGNED_LOCATION
        location_totals[name] = location_totals.get(name, 0) + int(qty)
    inventory_by_location = [
        schemas.NamedValue(name=name, value=value)
        for name, value in sorted(location_totals.items(), key=lambda kv: (-kv[1], kv[0]))
    ]

    recent_assets = (
        db.query(Asset)
        .order_by(Asset.updated_at.desc(), Asset.id.desc())
        .limit(RECENT_ASSETS_LIMIT)
        .all()
    )
    low_stock_list = (
        db.query(Item)
        .filter(low_stock_filter)
        .order_by((Item.min_stock - Item.stock).desc(), Item.sku.asc())
        .limit(LOW_STOCK_LIST_LIMIT)
        .all()
    )

    return schemas.DashboardSummary(
        kpis=schemas.DashboardKpis(
            total_assets=total_assets,
            total_inventory_qty=int(total_inventory_qty),
            low_stock_items=int(low_stock_items),
            assets_in_repair=int(status_counts.get(asset_models.AssetStatusEnum.REPAIR, 0)),
        ),
        assets_by_status=assets_by_status,
        inventory_by_location=inventory_by_location,
        recent_assets=[AssetRead.model_validate(asset) for asset in recent_assets],
        low_stock_list=[InventoryItemRead.model_validate(item) for item in low_stock_list],
    )
