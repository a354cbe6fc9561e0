from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from loudstock.app.api.deps import get_db
from loudstock.app.db.models.core_types import MovementDirection, OperationType
from loudstock.app.schemas.stock_movement import StockMovementRead
from loudstock.services.movements import query_movements, record_movement

router = APIRouter(prefix="/stock-movements")


# ---------- Schemas ----------
class MovementCreate(BaseModel):
    direction: MovementDirection
    product_name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(gt=0)
    barcode: str | None = Field(default=None, max_length=96)
    product_reference: str | None = Field(default=None, max_length=64)
    size: str | None = Field(default=None, max_length=16)
    old_stock: int | None = Field(default=None, ge=0)
    new_stock: int | None = Field(default=None, ge=0)
    order_number: str | None = Field(default=None, max_length=128)
    tracking_number: str | None = Field(default=None, max_length=128)
    notes: str | None = None
    operation_type: OperationType | None = None
    operator: str | None = Field(default=None, max_length=128)


# ---------- Endpoints ----------
@router.get("", response_model=list[StockMovementRead])
def list_movements(
    operation_type: OperationType | None = None,
    direction: MovementDirection | None = None,
    reference: str | None = None,
    tracking: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: int = Query(default=100, gt=0, le=1000),
    db: Session = Depends(get_db),
):
    """Historique (lecture seule) : pas de modification ni de suppression."""
    return query_movements(
        db,
        operation_type=operation_type,
        direction=direction,
        reference=reference,
        tracking=tracking,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )


@router.post("", response_model=StockMovementRead, status_code=201)
def append_movement(payload: MovementCreate, db: Session = Depends(get_db)):
    mv = record_movement(db, **payload.model_dump())
    db.commit()
    db.refresh(mv)
    return mv
