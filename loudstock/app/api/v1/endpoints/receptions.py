from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from loudstock.app.api.deps import get_db
from loudstock.app.db.models.core_types import PaymentStatus, ReceptionStatus
from loudstock.services.catalog import SqlCatalog
from loudstock.services.receptions import (
    ReceptionLine,
    create_reception,
    list_receptions,
    update_reception,
)

router = APIRouter(prefix="/inventory/receptions")


class ReceptionItemCreate(BaseModel):
    product_name: str = Field(min_length=1, max_length=255)
    reference: str | None = Field(default=None, max_length=64)
    size: str | None = Field(default=None, max_length=16)
    quantity: int = Field(gt=0)
    barcode: str | None = Field(default=None, max_length=96)


class ReceptionCreate(BaseModel):
    atelier: str = Field(min_length=1, max_length=200)
    date: dt.date | None = None
    notes: str | None = None
    total_cost: Decimal = Field(default=Decimal("0"), ge=0)
    operator: str | None = Field(default=None, max_length=128)
    items: list[ReceptionItemCreate] = Field(min_length=1)


class ReceptionPatch(BaseModel):
    payment_status: PaymentStatus | None = None
    total_cost: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class ReceptionItemRead(BaseModel):
    id: int
    product_name: str
    reference: str | None
    size: str | None
    quantity: int
    barcode: str | None

    class Config:
        from_attributes = True


class ReceptionRead(BaseModel):
    id: int
    atelier: str
    reception_date: date
    notes: str | None
    total_cost: Decimal
    status: ReceptionStatus
    payment_status: PaymentStatus
    created_at: datetime
    items: list[ReceptionItemRead]

    class Config:
        from_attributes = True


@router.post("")
def post_reception(payload: ReceptionCreate, db: Session = Depends(get_db)):
    reception, updates = create_reception(
        db,
        SqlCatalog(db),
        atelier=payload.atelier,
        items=[ReceptionLine(**item.model_dump()) for item in payload.items],
        reception_date=payload.date,
        notes=payload.notes,
        total_cost=payload.total_cost,
        operator=payload.operator,
    )
    return {
        "success": True,
        "reception": ReceptionRead.model_validate(reception),
        "stock_updates": [
            {
                "reference": u.line.reference,
                "size": u.line.size,
                "quantity": u.line.quantity,
                "status": u.status,
                "reason": u.reason,
            }
            for u in updates
        ],
    }


@router.get("", response_model=list[ReceptionRead])
def get_receptions(limit: int = Query(default=50, gt=0, le=500), db: Session = Depends(get_db)):
    return list_receptions(db, limit=limit)


@router.patch("/{reception_id}", response_model=ReceptionRead)
def patch_reception(reception_id: int, payload: ReceptionPatch, db: Session = Depends(get_db)):
    reception = update_reception(
        db,
        reception_id,
        payment_status=payload.payment_status,
        total_cost=payload.total_cost,
        notes=payload.notes,
    )
    if reception is None:
        raise HTTPException(status_code=404, detail="Reception not found")
    return reception
