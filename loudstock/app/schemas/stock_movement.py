from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from loudstock.app.db.models.core_types import MovementDirection, OperationType


class StockMovementRead(BaseModel):
    id: int
    created_at: datetime
    direction: MovementDirection
    operation_type: OperationType | None
    barcode: str | None
    product_name: str
    product_reference: str | None
    size: str | None
    quantity: int
    old_stock: int | None
    new_stock: int | None  # plancher à 0 : ne reflète pas un éventuel déficit
    order_number: str | None
    tracking_number: str | None
    notes: str | None
    operator: str | None

    class Config:
        from_attributes = True
