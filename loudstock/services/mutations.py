"""
Application d'un lot validé : une mutation catalogue par unité physique,
un mouvement de stock par ligne. Les unités visent le produit et la taille
résolus à la validation, jamais un code-barres re-découpé.

Tout le lot vit dans la transaction de la session : si une unité échoue,
la session est rollback (aucune unité ni aucun mouvement du lot ne reste)
et PartialApplyFailure est levée. Le commit appartient à l'appelant.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loudstock.app.db.models.models_v1 import StockMovement
from loudstock.app.db.models.core_types import MovementDirection, OperationType, ScanAction
from loudstock.services.errors import PartialApplyFailure, UnitMutationError
from loudstock.services.movements import record_movement
from loudstock.services.types import ResolvedLineItem

logger = logging.getLogger(__name__)


def compute_new_stock(old_stock: int, quantity: int, direction: MovementDirection) -> int:
    if direction == MovementDirection.in_:
        return old_stock + quantity
    return max(0, old_stock - quantity)


def apply_batch(
    db: Session,
    catalog,
    items: Iterable[ResolvedLineItem],
    direction: MovementDirection,
    operation_type: OperationType,
    *,
    tracking_number: str | None = None,
    order_number: str | None = None,
    notes: str | None = None,
    operator: str | None = None,
) -> list[StockMovement]:
    direction = MovementDirection(direction)
    operation_type = OperationType(operation_type)
    action = ScanAction.add if direction == MovementDirection.in_ else ScanAction.remove

    movements: list[StockMovement] = []
    applied_units = 0
    current: ResolvedLineItem | None = None

    try:
        for item in items:
            current = item
            first_old: int | None = None

            for _ in range(item.quantity):
                unit = catalog.apply_unit_for(
                    item.product_id,
                    item.size,
                    action,
                    create_missing_size=item.synthesized_size,
                    barcode=item.barcode,
                )
                if first_old is None:
                    first_old = unit.old_stock
                applied_units += 1

            old_stock = item.old_stock if first_old is None else first_old
            new_stock = compute_new_stock(old_stock, item.quantity, direction)

            if direction == MovementDirection.out and old_stock < item.quantity:
                logger.warning(
                    "Stock floor hit on %s: old=%d qty=%d deficit=%d",
                    item.barcode,
                    old_stock,
                    item.quantity,
                    item.quantity - old_stock,
                )

            line_notes = notes
            if item.source is not None and item.source.original_line:
                line_notes = f"{notes}: {item.source.original_line}" if notes else item.source.original_line

            movements.append(
                record_movement(
                    db,
                    direction=direction,
                    operation_type=operation_type,
                    barcode=item.barcode,
                    product_name=item.product_name,
                    product_reference=item.reference,
                    size=item.size,
                    quantity=item.quantity,
                    old_stock=old_stock,
                    new_stock=new_stock,
                    tracking_number=tracking_number,
                    order_number=order_number,
                    notes=line_notes,
                    operator=operator,
                )
            )
    except (UnitMutationError, SQLAlchemyError) as exc:
        db.rollback()
        barcode = current.barcode if current is not None else "?"
        logger.error(
            "Batch apply failed on %s after %d unit(s), rolled back: %s",
            barcode,
            applied_units,
            exc,
        )
        raise PartialApplyFailure(barcode, str(exc), applied_units) from exc

    logger.info("Applied %d unit(s) over %d line(s) [%s]", applied_units, len(movements), operation_type.value)
    return movements
