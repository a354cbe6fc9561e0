from loudstock.app.db.models.core_types import ProductKind
from loudstock.services.sizes import (
    APPAREL_SIZES,
    FOOTWEAR_SIZES,
    infer_kind,
    is_accessory,
    is_apparel_size,
    is_footwear_product,
    is_footwear_size,
    normalize_size,
)
from loudstock.services.types import CatalogProduct, SizeVariant


def test_size_sets_are_a_partition():
    for token in FOOTWEAR_SIZES:
        assert is_footwear_size(token)
        assert not is_apparel_size(token)
    for token in APPAREL_SIZES:
        assert is_apparel_size(token)
        assert not is_footwear_size(token)


def test_unknown_tokens_are_neither():
    for token in ["S", "XS", "42", "35", "", None, "M L", "4O"]:
        assert not is_footwear_size(token)
        assert not is_apparel_size(token)


def test_apparel_is_case_insensitive():
    assert is_apparel_size("xl")
    assert is_apparel_size(" xxxl ")
    assert normalize_size(" xl ") == "XL"
    assert normalize_size("40") == "40"
    assert normalize_size(None) == ""


def test_accessory_and_footwear_products():
    sac = CatalogProduct(id=1, name="Sac", reference="SAC", kind=ProductKind.accessory, stock=2)
    tee_without_sizes = CatalogProduct(id=2, name="Tee", reference="TEE", kind=ProductKind.apparel)
    basket = CatalogProduct(
        id=3,
        name="Basket",
        reference="BSK",
        kind=ProductKind.footwear,
        sizes=[SizeVariant("40", 1)],
    )

    assert is_accessory(sac)
    assert is_accessory(tee_without_sizes)
    assert not is_accessory(basket)
    assert is_footwear_product(basket)
    assert not is_footwear_product(sac)


def test_infer_kind_from_category():
    assert infer_kind("accessoires-femme", None, has_sizes=True) == ProductKind.accessory
    assert infer_kind(None, "Accessories", has_sizes=False) == ProductKind.accessory
    assert infer_kind("chaussures", "Chaussures", has_sizes=True) == ProductKind.footwear
    assert infer_kind("women-shoes", None, has_sizes=True) == ProductKind.footwear
    assert infer_kind("robes", "Robes", has_sizes=True) == ProductKind.apparel
    assert infer_kind("robes", "Robes", has_sizes=False) == ProductKind.accessory
