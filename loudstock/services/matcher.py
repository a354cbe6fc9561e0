"""
Sélection du produit catalogue correspondant à une ligne Yalidine.

Barème (le plus haut gagne, égalité -> premier vu) :
    taille demandée absente      -1000 (exclusion)
    nom identique                 +500
    nom candidat = préfixe        +300
    nom candidat contient         +100
    nom demandé contient           +50
    longueurs à 5 car. près        +20
"""

from __future__ import annotations

import dataclasses
from typing import Iterable

from loudstock.services.sizes import (
    is_apparel_size,
    is_footwear_product,
    is_footwear_size,
    normalize_size,
)
from loudstock.services.types import CatalogProduct, SizeVariant

EXCLUDED = -1000


def filter_by_size_type(candidates: Iterable[CatalogProduct], desired_size: str | None) -> list[CatalogProduct]:
    """Pointure -> chaussures uniquement ; taille vêtement -> chaussures exclues."""
    candidates = list(candidates)
    if is_footwear_size(desired_size):
        return [p for p in candidates if is_footwear_product(p)]
    if is_apparel_size(desired_size):
        return [p for p in candidates if not is_footwear_product(p)]
    return candidates


def _with_size(product: CatalogProduct, desired_size: str, synthesize_footwear: bool) -> CatalogProduct | None:
    if product.find_size(desired_size):
        return product

    if synthesize_footwear and is_footwear_product(product) and is_footwear_size(desired_size):
        # variante à stock 0 sur une copie : le catalogue n'est pas touché
        synthetic = SizeVariant(size=normalize_size(desired_size), stock=0, synthesized=True)
        return dataclasses.replace(product, sizes=[*product.sizes, synthetic])

    return None


def score_candidate(candidate_name: str, desired_name: str) -> int:
    name = candidate_name.strip().lower()
    desired = desired_name.strip().lower()

    score = 0
    if name == desired:
        score += 500
    elif desired.startswith(name):
        score += 300
    elif desired in name:
        score += 100
    elif name in desired:
        score += 50

    if abs(len(name) - len(desired)) <= 5:
        score += 20
    return score


def match_product(
    candidates: Iterable[CatalogProduct],
    desired_name: str,
    desired_size: str | None = "",
    *,
    synthesize_footwear: bool = True,
) -> CatalogProduct | None:
    desired_size = (desired_size or "").strip()

    best: CatalogProduct | None = None
    best_score = EXCLUDED - 1

    for candidate in candidates:
        if desired_size:
            eligible = _with_size(candidate, desired_size, synthesize_footwear)
            if eligible is None:
                score = EXCLUDED
            else:
                candidate = eligible
                score = score_candidate(candidate.name, desired_name)
        else:
            score = score_candidate(candidate.name, desired_name)

        if score > best_score:
            best, best_score = candidate, score

    if best is None or best_score < 0:
        return None
    return best
