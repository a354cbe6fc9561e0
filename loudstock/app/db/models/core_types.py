import enum


class ProductKind(str, enum.Enum):
    apparel = "APPAREL"
    footwear = "FOOTWEAR"
    accessory = "ACCESSORY"


class MovementDirection(str, enum.Enum):
    in_ = "in"
    out = "out"


class OperationType(str, enum.Enum):
    entree = "entree"
    sortie = "sortie"
    echange = "echange"
    retour = "retour"


class Section(str, enum.Enum):
    sortie = "sortie"
    echange = "echange"
    retour = "retour"


class ScanAction(str, enum.Enum):
    add = "add"
    remove = "remove"


class ReceptionStatus(str, enum.Enum):
    pending = "PENDING"
    completed = "COMPLETED"
    cancelled = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    pending = "PENDING"
    partial = "PARTIAL"
    paid = "PAID"


class LineErrorKind(str, enum.Enum):
    product_not_found = "PRODUCT_NOT_FOUND"
    size_not_found = "SIZE_NOT_FOUND"
    insufficient_stock = "INSUFFICIENT_STOCK"
    system_error = "SYSTEM_ERROR"


# Section -> (sens du mouvement, type d'opération)
SECTION_FLOW: dict[Section, tuple[MovementDirection, OperationType]] = {
    Section.sortie: (MovementDirection.out, OperationType.sortie),
    Section.echange: (MovementDirection.out, OperationType.echange),
    Section.retour: (MovementDirection.in_, OperationType.retour),
}
