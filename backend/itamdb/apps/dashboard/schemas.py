from __future__ import annotations

from typing import List

from itamdb.apps.assets.schemas import AssetRead
from itamdb.apps.inventory.schemas import InventoryItemRead
from itamdb.schemas import APIModel


class DashboardKpis(APIModel):
    total_assets: int
    total_inventory_qty: int
    low_stock_items: int
    assets_in_repair: int


class NamedValue(APIModel):
    name: str
    value: int


class DashboardSummary(APIModel):
    kpis: DashboardKpis
    assets_by_status: List[NamedValue]
    inventory_by_location: List[NamedValue]
    recent_assets: List[AssetRead]
    low_stock_list: List[InventoryItemRead]
