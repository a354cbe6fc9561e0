from __future__ import annotations

from dataclasses import dataclass, field

from loudstock.app.db.models.core_types import LineErrorKind, ProductKind


@dataclass
class SizeVariant:
    size: str
    stock: int
    synthesized: bool = False


@dataclass
class CatalogProduct:
    """Instantané d'un produit du catalogue (jamais attaché à la session)."""

    id: int
    name: str
    reference: str
    kind: ProductKind
    stock: int = 0
    sizes: list[SizeVariant] = field(default_factory=list)
    category_slug: str | None = None
    category_name: str | None = None

    def find_size(self, size: str) -> SizeVariant | None:
        target = size.strip().lower()
        for variant in self.sizes:
            if variant.size.strip().lower() == target:
                return variant
        return None


@dataclass(frozen=True)
class ParsedLineItem:
    quantity: int
    product_name: str
    size: str = ""
    original_line: str = ""


@dataclass
class ResolvedLineItem:
    product_id: int
    product_name: str
    reference: str
    size: str
    barcode: str
    quantity: int
    old_stock: int
    synthesized_size: bool = False
    source: ParsedLineItem | None = None


@dataclass
class LineError:
    kind: LineErrorKind
    item: ParsedLineItem
    message: str
    required: int | None = None
    available: int | None = None


@dataclass
class BatchValidation:
    items: list[ResolvedLineItem] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and bool(self.items)


@dataclass(frozen=True)
class UnitResult:
    barcode: str
    old_stock: int
    new_stock: int


def make_barcode(reference: str, size: str | None) -> str:
    return f"{reference}-{size}" if size else reference
