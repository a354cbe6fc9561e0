"""initial reconciliation schema

Revision ID: 3f1a9c2b7d10
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("reference", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category_id", sa.BigInteger(), sa.ForeignKey("categories.id", ondelete="SET NULL")),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("stock >= 0", name="ck_product_stock_nonneg"),
    )
    op.create_index("ix_products_name", "products", ["name"])

    op.create_table(
        "product_sizes",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("product_id", sa.BigInteger(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("size", sa.String(16), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("product_id", "size", name="uq_product_size"),
        sa.CheckConstraint("stock >= 0", name="ck_product_size_stock_nonneg"),
    )
    op.create_index("ix_product_sizes_product_id", "product_sizes", ["product_id"])

    op.create_table(
        "stock_movements",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("direction", sa.Enum("in", "out", name="movement_direction"), nullable=False),
        sa.Column(
            "operation_type",
            sa.Enum("entree", "sortie", "echange", "retour", name="operation_type"),
        ),
        sa.Column("barcode", sa.String(96)),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("product_reference", sa.String(64)),
        sa.Column("size", sa.String(16)),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("old_stock", sa.Integer()),
        sa.Column("new_stock", sa.Integer()),
        sa.Column("order_number", sa.String(128)),
        sa.Column("tracking_number", sa.String(128)),
        sa.Column("notes", sa.Text()),
        sa.Column("operator", sa.String(128)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("quantity > 0", name="ck_stock_movement_qty_pos"),
    )
    op.create_index("ix_stock_movements_operation_type", "stock_movements", ["operation_type"])
    op.create_index("ix_stock_movements_product_reference", "stock_movements", ["product_reference"])
    op.create_index("ix_stock_movements_tracking_number", "stock_movements", ["tracking_number"])
    op.create_index("ix_stock_movements_created_at", "stock_movements", ["created_at"])

    op.create_table(
        "consumed_trackings",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column(
            "section",
            sa.Enum("sortie", "echange", "retour", name="reconciliation_section"),
            nullable=False,
        ),
        sa.Column("tracking_code", sa.String(128), nullable=False),
        sa.Column("movement_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("consumed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("section", "tracking_code", name="uq_consumed_section_tracking"),
    )

    op.create_table(
        "stock_receptions",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("atelier", sa.String(200), nullable=False),
        sa.Column("date", sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column("notes", sa.Text()),
        sa.Column("total_cost", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column(
            "status",
            sa.Enum("pending", "completed", "cancelled", name="reception_status"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum("pending", "partial", "paid", name="payment_status"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("total_cost >= 0", name="ck_reception_total_cost_nonneg"),
    )

    op.create_table(
        "stock_reception_items",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column(
            "reception_id",
            sa.BigInteger(),
            sa.ForeignKey("stock_receptions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("reference", sa.String(64)),
        sa.Column("size", sa.String(16)),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("barcode", sa.String(96)),
        sa.CheckConstraint("quantity > 0", name="ck_reception_item_qty_pos"),
    )
    op.create_index("ix_stock_reception_items_reception_id", "stock_reception_items", ["reception_id"])
    op.create_index("ix_reception_items_reference", "stock_reception_items", ["reference"])


def downgrade() -> None:
    op.drop_table("stock_reception_items")
    op.drop_table("stock_receptions")
    op.drop_table("consumed_trackings")
    op.drop_table("stock_movements")
    op.drop_table("product_sizes")
    op.drop_table("products")
    op.drop_table("categories")

    for enum_name in (
        "payment_status",
        "reception_status",
        "reconciliation_section",
        "operation_type",
        "movement_direction",
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
