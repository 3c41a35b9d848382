"""Initial schema: users, assets, inventory items, movement ledger, activity log.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _table_exists(table_name: str) -> bool:
    bind = op.get_bind()
    return bool(inspect(bind).has_table(table_name))


def upgrade() -> None:
    if not _table_exists("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("username", sa.String(length=64), nullable=False),
            sa.Column("role", sa.String(length=5), nullable=False),
            sa.Column("hashed_password", sa.String(length=255), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_users_username", "users", ["username"], unique=True)
        op.create_index("idx_users_role_active", "users", ["role", "is_active"])

    if not _table_exists("assets"):
        op.create_table(
            "assets",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("asset_tag", sa.String(length=64), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("type", sa.String(length=7), nullable=False),
            sa.Column("brand", sa.String(length=128), nullable=True),
            sa.Column("model", sa.String(length=128), nullable=True),
            sa.Column("serial_number", sa.String(length=128), nullable=True, unique=True),
            sa.Column("status", sa.String(length=8), nullable=False),
            sa.Column("assigned_to", sa.String(length=255), nullable=True),
            sa.Column("location", sa.String(length=255), nullable=True),
            sa.Column("purchase_date", sa.Date(), nullable=True),
            sa.Column("warranty_end", sa.Date(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_assets_id", "assets", ["id"])
        op.create_index("ix_assets_asset_tag", "assets", ["asset_tag"], unique=True)
        op.create_index("ix_assets_status", "assets", ["status"])
        op.create_index("ix_assets_location", "assets", ["location"])
        op.create_index("ix_assets_status_type", "assets", ["status", "type"])
        op.create_index("ix_assets_updated_at", "assets", ["updated_at"])

    if not _table_exists("inventory_items"):
        op.create_table(
            "inventory_items",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("sku", sa.String(length=64), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("category", sa.String(length=10), nullable=False),
            sa.Column("unit", sa.String(length=16), nullable=False),
            sa.Column("location", sa.String(length=255), nullable=True),
            sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("min_stock", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
            sa.CheckConstraint("stock >= 0", name="ck_inventory_items_stock_non_negative"),
            sa.CheckConstraint("min_stock >= 0", name="ck_inventory_items_min_stock_non_negative"),
        )
        op.create_index("ix_inventory_items_id", "inventory_items", ["id"])
        op.create_index("ix_inventory_items_sku", "inventory_items", ["sku"], unique=True)
        op.create_index("ix_inventory_items_location", "inventory_items", ["location"])
        op.create_index(
            "ix_inventory_items_category_location",
            "inventory_items",
            ["category", "location"],
        )

    if not _table_exists("inventory_movements"):
        op.create_table(
            "inventory_movements",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "inventory_item_id",
                sa.Integer(),
                sa.ForeignKey("inventory_items.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("type", sa.String(length=6), nullable=False),
            sa.Column("qty", sa.Integer(), nullable=False),
            sa.Column("ref", sa.String(length=255), nullable=True),
            sa.Column("created_by", sa.String(length=64), nullable=True),
            sa.Column(
                "target_asset_id",
                sa.Integer(),
                sa.ForeignKey("assets.id", ondelete="SET NULL"),
                nullable=True,
            ),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.CheckConstraint("qty > 0", name="ck_inventory_movements_qty_positive"),
        )
        op.create_index("ix_inventory_movements_id", "inventory_movements", ["id"])
        op.create_index(
            "ix_inventory_movements_inventory_item_id",
            "inventory_movements",
            ["inventory_item_id"],
        )
        op.create_index(
            "ix_inventory_movements_target_asset_id",
            "inventory_movements",
            ["target_asset_id"],
        )
        op.create_index(
            "ix_inventory_movements_item_time",
            "inventory_movements",
            ["inventory_item_id", "created_at"],
        )

    if not _table_exists("activity_logs"):
        op.create_table(
            "activity_logs",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("actor_username", sa.String(length=64), nullable=True),
            sa.Column("actor_user_id", sa.String(length=36), nullable=True),
            sa.Column("action", sa.String(length=16), nullable=False),
            sa.Column("entity_type", sa.String(length=9), nullable=False),
            sa.Column("entity_id", sa.Integer(), nullable=True),
            sa.Column("correlation_id", sa.String(length=36), nullable=True),
            sa.Column("meta", sa.JSON(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_activity_logs_id", "activity_logs", ["id"])
        op.create_index("ix_activity_logs_actor_username", "activity_logs", ["actor_username"])
        op.create_index("ix_activity_logs_actor_user_id", "activity_logs", ["actor_user_id"])
        op.create_index("ix_activity_logs_action", "activity_logs", ["action"])
        op.create_index("ix_activity_logs_correlation_id", "activity_logs", ["correlation_id"])
        op.create_index("ix_activity_logs_entity", "activity_logs", ["entity_type", "entity_id"])
        op.create_index(
            "ix_activity_logs_time_desc",
            "activity_logs",
            [sa.text("created_at DESC"), sa.text("id DESC")],
        )


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_table("inventory_movements")
    op.drop_table("inventory_items")
    op.drop_table("assets")
    op.drop_table("users")
