from __future__ import annotations

import logging

from sqlalchemy import case, func, literal, or_, select
from sqlalchemy.orm import Session, selectinload

from loudstock.app.db.models.models_v1 import Product, ProductSize
from loudstock.app.db.models.core_types import ScanAction
from loudstock.services.errors import UnitMutationError
from loudstock.services.sizes import is_accessory, normalize_size
from loudstock.services.types import CatalogProduct, SizeVariant, UnitResult, make_barcode

logger = logging.getLogger(__name__)


def to_catalog_product(p: Product) -> CatalogProduct:
    return CatalogProduct(
        id=int(p.id),
        name=p.name,
        reference=p.reference,
        kind=p.kind,
        stock=int(p.stock or 0),
        sizes=[SizeVariant(size=s.size, stock=int(s.stock or 0)) for s in p.sizes],
        category_slug=p.category.slug if p.category else None,
        category_name=p.category.name if p.category else None,
    )


class SqlCatalog:
    """
    Catalogue adossé à la base.

    - search()     : recherche floue par nom (candidats du matcher)
    - apply_unit() : +1 / -1 sur un code-barres REF ou REF-TAILLE
    - apply_unit_for() : +1 / -1 sur un produit déjà résolu (id, taille)
    Ne commit jamais : la transaction appartient à l'appelant.
    """

    def __init__(self, db: Session, search_limit: int = 10):
        self.db = db
        self.search_limit = search_limit

    # ---------- lecture ----------
    def search(self, name: str, limit: int | None = None) -> list[CatalogProduct]:
        term = (name or "").strip()
        if not term:
            return []

        stmt = (
            select(Product)
            .options(selectinload(Product.sizes), selectinload(Product.category))
            .where(Product.active.is_(True))
            .where(
                or_(
                    Product.name.ilike(f"%{term}%"),
                    # "Sac" doit remonter pour "Sac Cuir Noir"
                    literal(term).ilike("%" + Product.name + "%"),
                )
            )
            # nom exact, puis préfixe, puis noms courts : la limite ne coupe jamais le bon produit
            .order_by(
                case(
                    (func.lower(Product.name) == term.lower(), 0),
                    (Product.name.ilike(f"{term}%"), 1),
                    else_=2,
                ),
                func.length(Product.name).asc(),
                Product.id.asc(),
            )
            .limit(limit or self.search_limit)
        )
        rows = self.db.execute(stmt).scalars().all()
        return [to_catalog_product(p) for p in rows]

    def get_by_reference(self, reference: str, *, lock: bool = False) -> Product | None:
        stmt = select(Product).where(Product.reference == reference)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def resolve_barcode(self, barcode: str) -> tuple[Product, str | None]:
        """
        REF-TAILLE (coupé au dernier tiret) ou REF seul pour les accessoires.
        Une référence contenant elle-même un tiret est retentée telle quelle.
        """
        barcode = (barcode or "").strip()
        if not barcode:
            raise UnitMutationError("Barcode is required")

        head, sep, tail = barcode.rpartition("-")
        if sep and head:
            product = self.get_by_reference(head, lock=True)
            if product is not None:
                return product, tail

        product = self.get_by_reference(barcode, lock=True)
        if product is None:
            reference = head if sep and head else barcode
            raise UnitMutationError(f'Product with reference "{reference}" not found')
        return product, None

    # ---------- écriture ----------
    def _locked_product(self, product_id: int) -> Product | None:
        return self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def _locked_size(self, product: Product, size: str) -> ProductSize | None:
        return (
            self.db.execute(
                select(ProductSize)
                .where(ProductSize.product_id == product.id)
                .where(ProductSize.size.ilike(size))
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            .scalars()
            .first()
        )

    def apply_unit(self, barcode: str, action: ScanAction, *, create_missing_size: bool = False) -> UnitResult:
        """Scan manuel : le produit est retrouvé depuis le code-barres."""
        product, size_name = self.resolve_barcode(barcode)
        return self._apply(product, size_name, action, barcode, create_missing_size)

    def apply_unit_for(
        self,
        product_id: int,
        size: str | None,
        action: ScanAction,
        *,
        create_missing_size: bool = False,
        barcode: str | None = None,
    ) -> UnitResult:
        """Produit déjà résolu (lot validé) : aucun re-découpage du code-barres."""
        product = self._locked_product(product_id)
        if product is None:
            raise UnitMutationError(f"Product {product_id} not found")
        barcode = barcode or make_barcode(product.reference, size)
        return self._apply(product, size or None, action, barcode, create_missing_size)

    def _apply(
        self,
        product: Product,
        size_name: str | None,
        action: ScanAction,
        barcode: str,
        create_missing_size: bool,
    ) -> UnitResult:
        action = ScanAction(action)

        if not size_name and is_accessory(product):
            old = int(product.stock or 0)
            new = old + 1 if action == ScanAction.add else max(0, old - 1)
            if action == ScanAction.remove and old == 0:
                logger.warning("Stock already 0 for %s, remove clamped", barcode)
            product.stock = new
            self.db.flush()
            return UnitResult(barcode=barcode, old_stock=old, new_stock=new)

        if not size_name:
            raise UnitMutationError(
                f'Product "{product.name}" requires a size. Format: {product.reference}-SIZE'
            )

        size = self._locked_size(product, size_name)
        if size is None:
            if not (create_missing_size and action == ScanAction.add):
                raise UnitMutationError(f'Size "{size_name}" not found for product "{product.name}"')
            size = ProductSize(product_id=product.id, size=normalize_size(size_name), stock=0)
            self.db.add(size)
            self.db.flush()
            logger.info("Created size %s for %s", size.size, product.reference)

        old = int(size.stock or 0)
        new = old + 1 if action == ScanAction.add else max(0, old - 1)
        if action == ScanAction.remove and old == 0:
            logger.warning("Stock already 0 for %s, remove clamped", barcode)
        size.stock = new
        self.db.flush()
        return UnitResult(barcode=barcode, old_stock=old, new_stock=new)
