from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from loudstock.app.db.models.models_v1 import StockMovement
from loudstock.app.db.models.core_types import MovementDirection, OperationType


def record_movement(
    db: Session,
    *,
    direction: MovementDirection,
    product_name: str,
    quantity: int,
    barcode: str | None = None,
    product_reference: str | None = None,
    size: str | None = None,
    old_stock: int | None = None,
    new_stock: int | None = None,
    tracking_number: str | None = None,
    order_number: str | None = None,
    notes: str | None = None,
    operation_type: OperationType | None = None,
    operator: str | None = None,
) -> StockMovement:
    """Ajout au journal (flush, pas de commit)."""
    mv = StockMovement(
        direction=direction,
        operation_type=operation_type,
        barcode=barcode,
        product_name=product_name,
        product_reference=product_reference,
        size=size or None,
        quantity=quantity,
        old_stock=old_stock,
        new_stock=new_stock,
        tracking_number=tracking_number,
        order_number=order_number,
        notes=notes,
        operator=operator,
        created_at=datetime.utcnow(),
    )
    db.add(mv)
    db.flush()
    return mv


def query_movements(
    db: Session,
    *,
    operation_type: OperationType | None = None,
    direction: MovementDirection | None = None,
    reference: str | None = None,
    tracking: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: int = 100,
) -> list[StockMovement]:
    stmt = select(StockMovement)

    if operation_type is not None:
        stmt = stmt.where(StockMovement.operation_type == operation_type)
    if direction is not None:
        stmt = stmt.where(StockMovement.direction == direction)
    if reference:
        stmt = stmt.where(StockMovement.product_reference == reference)
    if tracking:
        stmt = stmt.where(StockMovement.tracking_number == tracking)
    if date_from is not None:
        stmt = stmt.where(StockMovement.created_at >= date_from)
    if date_to is not None:
        stmt = stmt.where(StockMovement.created_at <= date_to)

    stmt = stmt.order_by(StockMovement.created_at.desc(), StockMovement.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())
