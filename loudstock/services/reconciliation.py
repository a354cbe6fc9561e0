"""
Rapprochement colis Yalidine -> stock.

    scan -> registre (doublon ?) -> Yalidine -> parse -> validation du lot
         -> mutations + mouvements + registre dans UNE transaction -> commit

Rien n'est écrit tant que toutes les lignes ne sont pas valides.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from loudstock.app.db.models.models_v1 import StockMovement
from loudstock.app.db.models.core_types import SECTION_FLOW, MovementDirection, OperationType, Section
from loudstock.services.catalog import SqlCatalog
from loudstock.services.errors import (
    BatchRejected,
    DuplicateTrackingCode,
    InvalidTrackingCode,
    ParseEmpty,
)
from loudstock.services.ledger import IdempotencyLedger
from loudstock.services.mutations import apply_batch
from loudstock.services.product_list import parse_product_list
from loudstock.services.types import ResolvedLineItem
from loudstock.services.validation import validate_batch

logger = logging.getLogger(__name__)

SECTION_NOTES = {
    Section.sortie: "Auto-scan deduction",
    Section.echange: "Echange Yalidine",
    Section.retour: "Retour Yalidine",
}


@dataclass
class ReconciliationResult:
    section: Section
    tracking_code: str
    direction: MovementDirection
    operation_type: OperationType
    items: list[ResolvedLineItem] = field(default_factory=list)
    movements: list[StockMovement] = field(default_factory=list)

    @property
    def units(self) -> int:
        return sum(i.quantity for i in self.items)


class ReconciliationEngine:
    def __init__(
        self,
        db: Session,
        carrier,
        *,
        ledger: IdempotencyLedger | None = None,
        catalog=None,
        footwear_synthesis: bool = True,
        exchange_prefix: str = "ECH-",
        search_limit: int = 10,
    ):
        self.db = db
        self.carrier = carrier
        self.ledger = ledger or IdempotencyLedger(db)
        self.catalog = catalog or SqlCatalog(db, search_limit=search_limit)
        self.footwear_synthesis = footwear_synthesis
        self.exchange_prefix = exchange_prefix

    @classmethod
    def from_settings(cls, db: Session, carrier, settings) -> "ReconciliationEngine":
        return cls(
            db,
            carrier,
            footwear_synthesis=settings.FOOTWEAR_SIZE_SYNTHESIS,
            exchange_prefix=settings.EXCHANGE_PREFIX,
            search_limit=settings.CATALOG_SEARCH_LIMIT,
        )

    def normalize_code(self, section: Section, tracking_code: str) -> str:
        code = (tracking_code or "").strip()
        if not code:
            raise InvalidTrackingCode("Tracking code is required")

        if section == Section.echange:
            code = code.upper()
            if self.exchange_prefix and not code.startswith(self.exchange_prefix.upper()):
                raise InvalidTrackingCode(f'Format invalide. Doit commencer par "{self.exchange_prefix}"')
        return code

    def process(self, section: Section, tracking_code: str, operator: str | None = None) -> ReconciliationResult:
        section = Section(section)
        code = self.normalize_code(section, tracking_code)
        direction, operation_type = SECTION_FLOW[section]

        # 1) doublon : avant tout appel réseau
        if self.ledger.is_consumed(section, code):
            logger.warning("Duplicate scan %s in %s", code, section.value)
            raise DuplicateTrackingCode(section, code)

        logger.info("Scan %s in %s", code, section.value)

        # 2) Yalidine
        parcel = self.carrier.get_parcel(code)

        # 3) parse
        items = list(parse_product_list(parcel.product_list))
        if not items:
            raise ParseEmpty(code, parcel.product_list)

        # 4) validation complète du lot
        validation = validate_batch(
            items,
            self.catalog,
            direction,
            synthesize_footwear=self.footwear_synthesis,
        )
        if validation.errors:
            # lectures seules, mais on libère la transaction
            self.db.rollback()
            raise BatchRejected(code, validation.errors)

        # 5) mutations + registre, même transaction
        movements = apply_batch(
            self.db,
            self.catalog,
            validation.items,
            direction,
            operation_type,
            tracking_number=parcel.tracking or code,
            order_number=parcel.tracking or code,
            notes=f"{SECTION_NOTES[section]} {code}",
            operator=operator,
        )
        try:
            self.ledger.mark_consumed(section, code, movement_count=len(movements))
        except DuplicateTrackingCode:
            self.db.rollback()
            raise
        self.db.commit()

        logger.info("Tracking %s consumed in %s (%d movement(s))", code, section.value, len(movements))
        return ReconciliationResult(
            section=section,
            tracking_code=code,
            direction=direction,
            operation_type=operation_type,
            items=validation.items,
            movements=movements,
        )
