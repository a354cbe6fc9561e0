from pydantic import BaseModel

from loudstock.app.db.models.core_types import ProductKind


class SizeVariantRead(BaseModel):
    size: str
    stock: int

    class Config:
        from_attributes = True


class CatalogProductRead(BaseModel):
    id: int
    name: str
    reference: str
    kind: ProductKind
    stock: int
    sizes: list[SizeVariantRead]
    category_slug: str | None = None
    category_name: str | None = None

    class Config:
        from_attributes = True
