"""
Validation d'un lot (toutes les lignes d'un colis) AVANT toute mutation.

Chaque ligne est évaluée même après un échec, pour remonter la liste
complète des erreurs en une seule passe. Une seule erreur suffit à
rejeter le lot entier.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from loudstock.app.db.models.core_types import LineErrorKind, MovementDirection
from loudstock.services.matcher import filter_by_size_type, match_product
from loudstock.services.sizes import (
    is_accessory,
    is_apparel_size,
    is_footwear_size,
    normalize_size,
)
from loudstock.services.types import (
    BatchValidation,
    LineError,
    ParsedLineItem,
    ResolvedLineItem,
    make_barcode,
)

logger = logging.getLogger(__name__)


def _error(kind: LineErrorKind, item: ParsedLineItem, message: str, **extra) -> LineError:
    return LineError(kind=kind, item=item, message=message, **extra)


def validate_line(
    item: ParsedLineItem,
    catalog,
    direction: MovementDirection = MovementDirection.out,
    *,
    synthesize_footwear: bool = True,
) -> ResolvedLineItem | LineError:
    desired_size = item.size.strip()

    if desired_size and not (is_footwear_size(desired_size) or is_apparel_size(desired_size)):
        return _error(
            LineErrorKind.size_not_found,
            item,
            f'Taille "{desired_size}" inconnue pour "{item.product_name}"',
        )

    try:
        candidates = catalog.search(item.product_name)
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Catalog lookup failed for %r", item.product_name)
        return _error(
            LineErrorKind.system_error,
            item,
            f'Erreur système pour "{item.product_name}": {exc}',
        )

    candidates = filter_by_size_type(candidates, desired_size)
    product = match_product(
        candidates,
        item.product_name,
        desired_size,
        synthesize_footwear=synthesize_footwear,
    )

    if product is None:
        # produit trouvé par nom mais sans la taille -> erreur de taille
        if desired_size and match_product(candidates, item.product_name, "") is not None:
            return _error(
                LineErrorKind.size_not_found,
                item,
                f'Taille "{desired_size}" introuvable pour "{item.product_name}"',
            )
        return _error(
            LineErrorKind.product_not_found,
            item,
            f'Produit "{item.product_name}" introuvable',
        )

    if desired_size:
        variant = product.find_size(desired_size)
        size = normalize_size(variant.size)
        available = variant.stock
        synthesized = variant.synthesized
    elif is_accessory(product):
        size = ""
        available = product.stock
        synthesized = False
    else:
        return _error(
            LineErrorKind.size_not_found,
            item,
            f'Taille requise pour "{product.name}" (tailles: {", ".join(s.size for s in product.sizes)})',
        )

    if direction == MovementDirection.out and available < item.quantity:
        label = f"{product.name} ({size})" if size else product.name
        return _error(
            LineErrorKind.insufficient_stock,
            item,
            f'Stock insuffisant pour "{label}". Stock: {available}, Requis: {item.quantity}',
            required=item.quantity,
            available=available,
        )

    return ResolvedLineItem(
        product_id=product.id,
        product_name=product.name,
        reference=product.reference,
        size=size,
        barcode=make_barcode(product.reference, size),
        quantity=item.quantity,
        old_stock=available,
        synthesized_size=synthesized,
        source=item,
    )


def validate_batch(
    items: Iterable[ParsedLineItem],
    catalog,
    direction: MovementDirection = MovementDirection.out,
    *,
    synthesize_footwear: bool = True,
) -> BatchValidation:
    result = BatchValidation()
    # unités déjà réservées par les lignes précédentes, par code-barres
    claimed: dict[str, int] = {}

    for item in items:
        outcome = validate_line(item, catalog, direction, synthesize_footwear=synthesize_footwear)
        if isinstance(outcome, LineError):
            result.errors.append(outcome)
            continue

        if direction == MovementDirection.out:
            already = claimed.get(outcome.barcode, 0)
            available = outcome.old_stock - already
            if available < outcome.quantity:
                result.errors.append(
                    _error(
                        LineErrorKind.insufficient_stock,
                        item,
                        f'Stock insuffisant pour "{outcome.barcode}" (lignes cumulées). '
                        f"Stock: {available}, Requis: {outcome.quantity}",
                        required=outcome.quantity,
                        available=available,
                    )
                )
                continue
            claimed[outcome.barcode] = already + outcome.quantity

        result.items.append(outcome)

    if result.errors:
        logger.warning(
            "Batch rejected: %d error(s) / %d line(s)",
            len(result.errors),
            len(result.errors) + len(result.items),
        )
    return result
