from sqlalchemy.exc import OperationalError

from loudstock.app.db.models.core_types import LineErrorKind, MovementDirection, ProductKind
from loudstock.services.catalog import SqlCatalog
from loudstock.services.product_list import parse_product_list
from loudstock.services.validation import validate_batch


def validate(db, text, direction=MovementDirection.out, **kwargs):
    return validate_batch(parse_product_list(text), SqlCatalog(db), direction, **kwargs)


def test_reference_parcel_is_valid(db_session, robe_and_sac):
    result = validate(db_session, "2x Robe Ete (M)\n1x Sac")

    assert result.ok
    assert [(i.barcode, i.quantity, i.old_stock) for i in result.items] == [
        ("ROBE-ETE-M", 2, 3),
        ("SAC", 1, 1),
    ]


def test_every_line_is_reported(db_session, robe_and_sac):
    text = "\n".join(
        [
            "1x Inconnu (M)",
            "5x Robe Ete (M)",
            "1x Robe Ete (S)",
            "1x Robe Ete (XL)",
            "1x Robe Ete",
            "1x Sac",
        ]
    )
    result = validate(db_session, text)

    assert not result.ok
    assert [e.kind for e in result.errors] == [
        LineErrorKind.product_not_found,
        LineErrorKind.insufficient_stock,
        LineErrorKind.size_not_found,
        LineErrorKind.size_not_found,
        LineErrorKind.size_not_found,
    ]
    shortage = result.errors[1]
    assert (shortage.required, shortage.available) == (5, 3)
    # la ligne valide est résolue quand même
    assert [i.barcode for i in result.items] == ["SAC"]


def test_lines_on_same_barcode_are_cumulated(db_session, robe_and_sac):
    result = validate(db_session, "2x Robe Ete (M)\n2x Robe Ete (M)")

    assert len(result.items) == 1
    (error,) = result.errors
    assert error.kind == LineErrorKind.insufficient_stock
    assert error.available == 1


def test_return_skips_stock_check(db_session, robe_and_sac):
    result = validate(db_session, "5x Robe Ete (M)\n4x Sac", MovementDirection.in_)
    assert result.ok


def test_size_type_drives_candidate(db_session, make_product):
    make_product("Basket Urbaine", "BSK-URB", ProductKind.footwear, sizes={"38": 1, "39": 1})
    make_product("Basket Urbaine Tee", "BSK-TEE", ProductKind.apparel, sizes={"M": 2})

    result = validate(db_session, "1x Basket Urbaine (M)\n1x Basket Urbaine (38)")

    assert [i.reference for i in result.items] == ["BSK-TEE", "BSK-URB"]


def test_synthesized_footwear_size(db_session, make_product):
    make_product("Basket Urbaine", "BSK-URB", ProductKind.footwear, sizes={"38": 1})

    out = validate(db_session, "1x Basket Urbaine (40)")
    (error,) = out.errors
    assert error.kind == LineErrorKind.insufficient_stock
    assert error.available == 0

    back = validate(db_session, "1x Basket Urbaine (40)", MovementDirection.in_)
    (item,) = back.items
    assert item.synthesized_size
    assert item.barcode == "BSK-URB-40"
    assert item.old_stock == 0

    strict = validate(db_session, "1x Basket Urbaine (40)", MovementDirection.in_, synthesize_footwear=False)
    assert strict.errors[0].kind == LineErrorKind.size_not_found


class BrokenCatalog:
    def search(self, name, limit=None):
        raise OperationalError("SELECT", {}, Exception("connection lost"))


def test_lookup_failure_is_a_system_error():
    result = validate_batch(parse_product_list("1x Sac\n1x Robe (M)"), BrokenCatalog())

    assert [e.kind for e in result.errors] == [LineErrorKind.system_error] * 2
    assert result.items == []
