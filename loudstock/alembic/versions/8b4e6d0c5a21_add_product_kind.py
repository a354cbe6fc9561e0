"""add products.kind, backfilled from category slugs

Revision ID: 8b4e6d0c5a21
Revises: 3f1a9c2b7d10
Create Date: 2026-10-18
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8b4e6d0c5a21"
down_revision: Union[str, Sequence[str], None] = "3f1a9c2b7d10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

product_kind = sa.Enum("apparel", "footwear", "accessory", name="product_kind")


def upgrade() -> None:
    product_kind.create(op.get_bind(), checkfirst=True)
    op.add_column(
        "products",
        sa.Column("kind", product_kind, nullable=False, server_default="apparel"),
    )

    # Backfill : même règle que services.sizes.infer_kind (accessoire d'abord)
    op.execute(
        """
        UPDATE products p
        SET kind = 'footwear'
        FROM categories c
        WHERE c.id = p.category_id
          AND (lower(c.slug) LIKE '%shoe%' OR lower(c.slug) LIKE '%chaussure%'
               OR lower(c.name) LIKE '%shoe%' OR lower(c.name) LIKE '%chaussure%');
        """
    )
    op.execute(
        """
        UPDATE products p
        SET kind = 'accessory'
        FROM categories c
        WHERE c.id = p.category_id
          AND (lower(c.slug) LIKE '%accessoire%' OR lower(c.slug) LIKE '%accessories%'
               OR lower(c.name) LIKE '%accessoire%' OR lower(c.name) LIKE '%accessories%');
        """
    )
    op.execute(
        """
        UPDATE products
        SET kind = 'accessory'
        WHERE kind = 'apparel'
          AND NOT EXISTS (SELECT 1 FROM product_sizes s WHERE s.product_id = products.id);
        """
    )


def downgrade() -> None:
    op.drop_column("products", "kind")
    product_kind.drop(op.get_bind(), checkfirst=True)
