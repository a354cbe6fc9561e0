from __future__ import annotations

from loudstock.services.types import LineError


class ReconciliationError(Exception):
    """Base des erreurs du moteur de rapprochement."""


class DuplicateTrackingCode(ReconciliationError):
    def __init__(self, section, tracking_code: str):
        self.section = section
        self.tracking_code = tracking_code
        super().__init__(f"Tracking {tracking_code} already processed in section {section.value}")


class InvalidTrackingCode(ReconciliationError):
    pass


class ParseEmpty(ReconciliationError):
    def __init__(self, tracking_code: str, product_list: str | None = None):
        self.tracking_code = tracking_code
        self.product_list = product_list
        super().__init__(f"No parsable product line for tracking {tracking_code}")


class BatchRejected(ReconciliationError):
    def __init__(self, tracking_code: str, errors: list[LineError]):
        self.tracking_code = tracking_code
        self.errors = errors
        super().__init__(f"{len(errors)} line(s) failed validation for tracking {tracking_code}")


class CarrierError(ReconciliationError):
    pass


class CarrierQuotaExceeded(CarrierError):
    pass


class UnitMutationError(ReconciliationError):
    pass


class PartialApplyFailure(ReconciliationError):
    """Une mutation a échoué après validation : tout le lot a été annulé."""

    def __init__(self, barcode: str, reason: str, applied_units: int = 0):
        self.barcode = barcode
        self.reason = reason
        self.applied_units = applied_units
        super().__init__(f"Apply failed on {barcode} after {applied_units} unit(s): {reason}")
