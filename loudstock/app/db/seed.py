from __future__ import annotations

from sqlalchemy import select

from loudstock.app.db.session import SessionLocal
from loudstock.app.db.models.models_v1 import Category, Product, ProductSize
from loudstock.services.sizes import infer_kind

CATEGORIES = [
    ("Robes", "robes"),
    ("Chaussures", "chaussures"),
    ("Accessoires", "accessoires"),
]

# (référence, nom, slug catégorie, {taille: stock} ou stock à plat)
PRODUCTS = [
    ("ROBE-ETE", "Robe Ete", "robes", {"M": 3, "L": 2, "XL": 1}),
    ("BASKET-URB", "Basket Urbaine", "chaussures", {"38": 2, "39": 2, "40": 1}),
    ("SAC-CUIR", "Sac", "accessoires", 1),
]


def run_seed():
    db = SessionLocal()
    try:
        categories = {}
        for name, slug in CATEGORIES:
            cat = db.scalar(select(Category).where(Category.slug == slug))
            if not cat:
                cat = Category(name=name, slug=slug)
                db.add(cat)
                db.flush()
            categories[slug] = cat

        for reference, name, slug, stock in PRODUCTS:
            if db.scalar(select(Product).where(Product.reference == reference)):
                continue

            cat = categories[slug]
            sized = isinstance(stock, dict)
            product = Product(
                reference=reference,
                name=name,
                category_id=cat.id,
                kind=infer_kind(cat.slug, cat.name, has_sizes=sized),
                stock=0 if sized else stock,
                sizes=[ProductSize(size=s, stock=q) for s, q in stock.items()] if sized else [],
            )
            db.add(product)

        db.commit()
        print(f"SEED OK: {len(CATEGORIES)} categories, {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
