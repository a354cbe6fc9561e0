from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from loudstock.app.api.deps import get_db
from loudstock.app.core.config import settings
from loudstock.app.db.models.core_types import ScanAction
from loudstock.app.schemas.product import CatalogProductRead
from loudstock.services.catalog import SqlCatalog
from loudstock.services.errors import UnitMutationError

router = APIRouter(prefix="/products")


class ScanRequest(BaseModel):
    barcode: str = Field(min_length=1, max_length=96)
    action: ScanAction


@router.get("", response_model=list[CatalogProductRead])
def search_products(
    search: str = Query(min_length=1),
    limit: int = Query(default=settings.CATALOG_SEARCH_LIMIT, gt=0, le=100),
    db: Session = Depends(get_db),
):
    return SqlCatalog(db).search(search, limit=limit)


@router.post("/scan")
def scan_product(payload: ScanRequest, db: Session = Depends(get_db)):
    """+1 / -1 sur un code-barres REF-TAILLE (ou REF pour un accessoire)."""
    catalog = SqlCatalog(db)
    try:
        unit = catalog.apply_unit(payload.barcode, payload.action)
    except UnitMutationError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc))

    db.commit()
    verb = "added" if payload.action == ScanAction.add else "removed"
    return {
        "success": True,
        "barcode": unit.barcode,
        "old_stock": unit.old_stock,
        "new_stock": unit.new_stock,
        "message": f"Successfully {verb} 1x {unit.barcode}",
    }
