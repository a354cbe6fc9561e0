import pytest
from sqlalchemy import func, select

from loudstock.app.db.models.core_types import MovementDirection, OperationType, ProductKind
from loudstock.app.db.models.models_v1 import StockMovement
from loudstock.services.catalog import SqlCatalog
from loudstock.services.errors import PartialApplyFailure
from loudstock.services.mutations import apply_batch, compute_new_stock
from loudstock.services.types import ParsedLineItem, ResolvedLineItem


def resolved(product, barcode, size, quantity, old_stock, **kwargs):
    return ResolvedLineItem(
        product_id=product.id,
        product_name=product.name,
        reference=product.reference,
        size=size,
        barcode=barcode,
        quantity=quantity,
        old_stock=old_stock,
        **kwargs,
    )


def test_compute_new_stock():
    assert compute_new_stock(3, 2, MovementDirection.out) == 1
    assert compute_new_stock(2, 5, MovementDirection.out) == 0
    assert compute_new_stock(2, 5, MovementDirection.in_) == 7


def test_floor_at_zero_keeps_full_quantity(db_session, make_product, stock_of):
    robe = make_product("Robe Ete", "ROBE-ETE", sizes={"M": 2})

    (mv,) = apply_batch(
        db_session,
        SqlCatalog(db_session),
        [resolved(robe, "ROBE-ETE-M", "M", 5, 2)],
        MovementDirection.out,
        OperationType.sortie,
    )
    db_session.commit()

    assert (mv.old_stock, mv.new_stock, mv.quantity) == (2, 0, 5)
    assert stock_of("ROBE-ETE", "M") == 0


def test_one_movement_per_line(db_session, robe_and_sac):
    robe, sac = robe_and_sac
    line = ParsedLineItem(quantity=2, product_name="Robe Ete", size="M", original_line="2x Robe Ete (M)")

    movements = apply_batch(
        db_session,
        SqlCatalog(db_session),
        [resolved(robe, "ROBE-ETE-M", "M", 2, 3, source=line), resolved(sac, "SAC", "", 1, 1)],
        MovementDirection.out,
        OperationType.sortie,
        tracking_number="YAL-1",
        notes="Auto-scan deduction YAL-1",
    )

    assert len(movements) == 2
    assert movements[0].notes == "Auto-scan deduction YAL-1: 2x Robe Ete (M)"
    assert movements[1].notes == "Auto-scan deduction YAL-1"
    assert movements[1].size is None
    assert {m.tracking_number for m in movements} == {"YAL-1"}


def test_unit_failure_rolls_back_whole_batch(db_session, robe_and_sac, stock_of):
    robe, _ = robe_and_sac
    items = [
        resolved(robe, "ROBE-ETE-M", "M", 1, 3),
        ResolvedLineItem(
            product_id=9999,
            product_name="Disparu",
            reference="NOPE",
            size="",
            barcode="NOPE",
            quantity=1,
            old_stock=1,
        ),
    ]

    with pytest.raises(PartialApplyFailure) as excinfo:
        apply_batch(db_session, SqlCatalog(db_session), items, MovementDirection.out, OperationType.sortie)

    assert excinfo.value.barcode == "NOPE"
    assert excinfo.value.applied_units == 1
    assert "after 1 unit(s)" in str(excinfo.value)
    assert stock_of("ROBE-ETE", "M") == 3
    assert db_session.scalar(select(func.count()).select_from(StockMovement)) == 0


def test_synthesized_size_is_created_on_return(db_session, make_product, stock_of):
    basket = make_product("Basket Urbaine", "BSK-URB", ProductKind.footwear, sizes={"38": 1})

    (mv,) = apply_batch(
        db_session,
        SqlCatalog(db_session),
        [resolved(basket, "BSK-URB-40", "40", 2, 0, synthesized_size=True)],
        MovementDirection.in_,
        OperationType.retour,
    )
    db_session.commit()

    assert (mv.old_stock, mv.new_stock) == (0, 2)
    assert stock_of("BSK-URB", "40") == 2
