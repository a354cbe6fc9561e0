from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from loudstock.app.db.models.models_v1 import ConsumedTracking
from loudstock.app.db.models.core_types import Section
from loudstock.services.errors import DuplicateTrackingCode


class IdempotencyLedger:
    """
    Registre des codes de suivi déjà traités, par section.

    Un même colis peut passer une fois en Sortie, une fois en Échange et une
    fois en Retour. Pas d'expiration, pas de suppression.
    """

    def __init__(self, db: Session):
        self.db = db

    def is_consumed(self, section: Section, tracking_code: str) -> bool:
        section = Section(section)
        row = self.db.execute(
            select(ConsumedTracking.id)
            .where(ConsumedTracking.section == section)
            .where(ConsumedTracking.tracking_code == tracking_code)
        ).first()
        return row is not None

    def mark_consumed(self, section: Section, tracking_code: str, movement_count: int = 0) -> ConsumedTracking:
        """À appeler dans la transaction du lot, uniquement si tout a réussi."""
        section = Section(section)
        entry = ConsumedTracking(
            section=section,
            tracking_code=tracking_code,
            movement_count=movement_count,
        )
        self.db.add(entry)
        try:
            self.db.flush()
        except IntegrityError as exc:
            # scan concurrent du même code dans la même section ; l'appelant rollback
            raise DuplicateTrackingCode(section, tracking_code) from exc
        return entry

    def consumed_codes(self, section: Section) -> list[str]:
        section = Section(section)
        rows = self.db.execute(
            select(ConsumedTracking.tracking_code)
            .where(ConsumedTracking.section == section)
            .order_by(ConsumedTracking.consumed_at.asc(), ConsumedTracking.id.asc())
        ).scalars()
        return list(rows)
