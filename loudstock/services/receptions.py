"""
Réceptions atelier (entrées de stock).

La réception est toujours enregistrée ; chaque article est ensuite ajouté
au stock unité par unité. Un article sans référence est ignoré, une
référence ou une taille inconnue est signalée en échec sans bloquer les
autres articles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from loudstock.app.db.models.models_v1 import StockReception, StockReceptionItem
from loudstock.app.db.models.core_types import (
    MovementDirection,
    OperationType,
    PaymentStatus,
    ReceptionStatus,
    ScanAction,
)
from loudstock.services.errors import UnitMutationError
from loudstock.services.movements import record_movement
from loudstock.services.sizes import normalize_size
from loudstock.services.types import make_barcode

logger = logging.getLogger(__name__)


@dataclass
class ReceptionLine:
    product_name: str
    quantity: int
    reference: str | None = None
    size: str | None = None
    barcode: str | None = None


@dataclass
class ReceptionUpdate:
    line: ReceptionLine
    status: str  # success | skipped | failed
    reason: str | None = None


def create_reception(
    db: Session,
    catalog,
    *,
    atelier: str,
    items: list[ReceptionLine],
    reception_date: date | None = None,
    notes: str | None = None,
    total_cost: Decimal | float = 0,
    operator: str | None = None,
) -> tuple[StockReception, list[ReceptionUpdate]]:
    reception = StockReception(
        atelier=atelier,
        reception_date=reception_date or date.today(),
        notes=notes,
        total_cost=Decimal(str(total_cost or 0)),
        status=ReceptionStatus.completed,
        payment_status=PaymentStatus.pending,
        items=[
            StockReceptionItem(
                product_name=line.product_name,
                reference=line.reference,
                size=normalize_size(line.size) or None,
                quantity=line.quantity,
                barcode=line.barcode,
            )
            for line in items
        ],
    )
    db.add(reception)
    db.flush()

    updates: list[ReceptionUpdate] = []
    for line in items:
        if not line.reference:
            updates.append(ReceptionUpdate(line, "skipped", "No reference"))
            continue

        size = normalize_size(line.size)
        barcode = make_barcode(line.reference, size)
        try:
            # savepoint par article : un échec n'annule pas les autres
            with db.begin_nested():
                # la référence est connue : pas de découpage du code-barres
                product = catalog.get_by_reference(line.reference)
                if product is None:
                    raise UnitMutationError(f'Product with reference "{line.reference}" not found')
                first = None
                for _ in range(line.quantity):
                    unit = catalog.apply_unit_for(product.id, size, ScanAction.add, barcode=barcode)
                    if first is None:
                        first = unit
                record_movement(
                    db,
                    direction=MovementDirection.in_,
                    operation_type=OperationType.entree,
                    barcode=barcode,
                    product_name=line.product_name,
                    product_reference=line.reference,
                    size=size,
                    quantity=line.quantity,
                    old_stock=first.old_stock,
                    new_stock=first.old_stock + line.quantity,
                    notes=f"Reception: {atelier}",
                    operator=operator,
                )
        except UnitMutationError as exc:
            logger.warning("[StockIn] %s: %s", barcode, exc)
            updates.append(ReceptionUpdate(line, "failed", str(exc)))
            continue

        logger.info("[StockIn] %s +%d", barcode, line.quantity)
        updates.append(ReceptionUpdate(line, "success"))

    db.commit()
    db.refresh(reception)
    return reception, updates


def list_receptions(db: Session, limit: int = 50) -> list[StockReception]:
    rows = db.execute(
        select(StockReception)
        .options(selectinload(StockReception.items))
        .order_by(StockReception.created_at.desc(), StockReception.id.desc())
        .limit(limit)
    ).scalars()
    return list(rows)


def update_reception(
    db: Session,
    reception_id: int,
    *,
    payment_status: PaymentStatus | None = None,
    total_cost: Decimal | float | None = None,
    notes: str | None = None,
) -> StockReception | None:
    reception = db.get(StockReception, reception_id)
    if reception is None:
        return None

    if payment_status is not None:
        reception.payment_status = PaymentStatus(payment_status)
    if total_cost is not None:
        reception.total_cost = Decimal(str(total_cost))
    if notes is not None:
        reception.notes = notes

    db.commit()
    db.refresh(reception)
    return reception
