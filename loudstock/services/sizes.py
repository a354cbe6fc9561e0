"""
Classification des tailles et des produits.

Chaussures : pointures 36..41. Vêtements : M, L, XL, XXL, XXXL.
Tout autre jeton n'est ni l'un ni l'autre : c'est un échec de validation,
jamais un repli.
"""

from __future__ import annotations

from loudstock.app.db.models.core_types import ProductKind

FOOTWEAR_SIZES = frozenset({"36", "37", "38", "39", "40", "41"})
APPAREL_SIZES = frozenset({"M", "L", "XL", "XXL", "XXXL"})

ACCESSORY_KEYWORDS = ("accessoire", "accessories")
FOOTWEAR_KEYWORDS = ("shoe", "chaussure")


def is_footwear_size(token: str | None) -> bool:
    return (token or "").strip() in FOOTWEAR_SIZES


def is_apparel_size(token: str | None) -> bool:
    return (token or "").strip().upper() in APPAREL_SIZES


def normalize_size(token: str | None) -> str:
    token = (token or "").strip()
    return token.upper() if is_apparel_size(token) else token


def is_accessory(product) -> bool:
    return product.kind == ProductKind.accessory or not product.sizes


def is_footwear_product(product) -> bool:
    return product.kind == ProductKind.footwear


def infer_kind(category_slug: str | None, category_name: str | None, has_sizes: bool) -> ProductKind:
    """
    Déduit le type d'un produit depuis sa catégorie.

    Sert uniquement à renseigner la colonne `kind` (création / backfill) ;
    le rapprochement lit `kind`, jamais les libellés de catégorie.
    """
    haystack = f"{category_slug or ''} {category_name or ''}".lower()

    if any(k in haystack for k in ACCESSORY_KEYWORDS):
        return ProductKind.accessory
    if any(k in haystack for k in FOOTWEAR_KEYWORDS):
        return ProductKind.footwear
    if not has_sizes:
        return ProductKind.accessory
    return ProductKind.apparel
