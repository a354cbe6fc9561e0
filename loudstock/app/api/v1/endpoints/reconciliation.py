from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from loudstock.app.api.deps import get_carrier, get_db
from loudstock.app.core.config import settings
from loudstock.app.db.models.core_types import Section
from loudstock.app.schemas.stock_movement import StockMovementRead
from loudstock.services.errors import (
    BatchRejected,
    CarrierError,
    DuplicateTrackingCode,
    InvalidTrackingCode,
    ParseEmpty,
    PartialApplyFailure,
)
from loudstock.services.ledger import IdempotencyLedger
from loudstock.services.reconciliation import ReconciliationEngine

router = APIRouter(prefix="/reconciliation")


class ScanCreate(BaseModel):
    tracking: str = Field(min_length=1, max_length=128)
    operator: str | None = Field(default=None, max_length=128)


def _line_errors(exc: BatchRejected) -> list[dict]:
    return [
        {
            "kind": e.kind.value,
            "line": e.item.original_line,
            "product_name": e.item.product_name,
            "size": e.item.size or None,
            "quantity": e.item.quantity,
            "message": e.message,
            "required": e.required,
            "available": e.available,
        }
        for e in exc.errors
    ]


@router.post("/{section}/scan")
def scan_parcel(
    section: Section,
    payload: ScanCreate,
    db: Session = Depends(get_db),
    carrier=Depends(get_carrier),
):
    engine = ReconciliationEngine.from_settings(db, carrier, settings)

    try:
        result = engine.process(section, payload.tracking, operator=payload.operator)
    except DuplicateTrackingCode as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except InvalidTrackingCode as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ParseEmpty:
        raise HTTPException(
            status_code=400,
            detail='Impossible d\'analyser les produits. Format attendu: "2x Produit (Taille)"',
        )
    except BatchRejected as exc:
        raise HTTPException(status_code=422, detail={"message": str(exc), "errors": _line_errors(exc)})
    except CarrierError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    except PartialApplyFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    return {
        "section": result.section,
        "tracking": result.tracking_code,
        "units": result.units,
        "movements": [StockMovementRead.model_validate(m) for m in result.movements],
    }


@router.get("/{section}/consumed/{tracking}")
def is_consumed(section: Section, tracking: str, db: Session = Depends(get_db)):
    tracking = tracking.strip()
    if section == Section.echange:
        tracking = tracking.upper()
    return {
        "section": section,
        "tracking": tracking,
        "consumed": IdempotencyLedger(db).is_consumed(section, tracking),
    }
