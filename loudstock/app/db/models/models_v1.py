from __future__ import annotations

from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    Date,
    Boolean,
    ForeignKey,
    Numeric,
    Text,
    Enum,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from loudstock.app.db.base import Base, BigIntPK
from loudstock.app.db.models.core_types import (
    ProductKind,
    MovementDirection,
    OperationType,
    Section,
    ReceptionStatus,
    PaymentStatus,
)


def _enum_values(enum_cls) -> list[str]:
    # on stocke "in"/"out"/"sortie"... plutôt que les noms Python
    return [m.value for m in enum_cls]


# ---------- CATALOG ----------
class Category(Base):
    __tablename__ = "categories"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)


class Product(Base):
    __tablename__ = "products"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    reference: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id", ondelete="SET NULL"))
    kind: Mapped[ProductKind] = mapped_column(
        Enum(ProductKind, name="product_kind"),
        default=ProductKind.apparel,
        nullable=False,
    )
    # stock "à plat" : seulement pour les accessoires (sans tailles)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    category: Mapped[Category | None] = relationship()
    sizes: Mapped[list["ProductSize"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductSize.id",
    )

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_product_stock_nonneg"),)


class ProductSize(Base):
    __tablename__ = "product_sizes"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size: Mapped[str] = mapped_column(String(16), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    product: Mapped[Product] = relationship(back_populates="sizes")

    __table_args__ = (
        UniqueConstraint("product_id", "size", name="uq_product_size"),
        CheckConstraint("stock >= 0", name="ck_product_size_stock_nonneg"),
    )


# ---------- INVENTORY ----------
class StockMovement(Base):
    """Journal des mouvements : append-only, jamais modifié ni supprimé."""

    __tablename__ = "stock_movements"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    direction: Mapped[MovementDirection] = mapped_column(
        Enum(MovementDirection, name="movement_direction", values_callable=_enum_values),
        nullable=False,
    )
    operation_type: Mapped[OperationType | None] = mapped_column(
        Enum(OperationType, name="operation_type", values_callable=_enum_values),
        index=True,
    )
    barcode: Mapped[str | None] = mapped_column(String(96))
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_reference: Mapped[str | None] = mapped_column(String(64), index=True)
    size: Mapped[str | None] = mapped_column(String(16))

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    old_stock: Mapped[int | None] = mapped_column(Integer)
    new_stock: Mapped[int | None] = mapped_column(Integer)

    order_number: Mapped[str | None] = mapped_column(String(128))
    tracking_number: Mapped[str | None] = mapped_column(String(128), index=True)
    notes: Mapped[str | None] = mapped_column(Text)
    operator: Mapped[str | None] = mapped_column(String(128))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=datetime.utcnow,
        nullable=False,
        index=True,
    )

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_stock_movement_qty_pos"),)


class ConsumedTracking(Base):
    """Codes de suivi déjà traités, un ensemble par section."""

    __tablename__ = "consumed_trackings"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    section: Mapped[Section] = mapped_column(
        Enum(Section, name="reconciliation_section", values_callable=_enum_values),
        nullable=False,
    )
    tracking_code: Mapped[str] = mapped_column(String(128), nullable=False)
    movement_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    consumed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("section", "tracking_code", name="uq_consumed_section_tracking"),
    )


# ---------- RECEPTIONS (ATELIERS) ----------
class StockReception(Base):
    __tablename__ = "stock_receptions"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    atelier: Mapped[str] = mapped_column(String(200), nullable=False)
    reception_date: Mapped[date] = mapped_column("date", Date, default=date.today, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    status: Mapped[ReceptionStatus] = mapped_column(
        Enum(ReceptionStatus, name="reception_status"),
        default=ReceptionStatus.completed,
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status"),
        default=PaymentStatus.pending,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    items: Mapped[list["StockReceptionItem"]] = relationship(
        back_populates="reception",
        cascade="all, delete-orphan",
        order_by="StockReceptionItem.id",
    )

    __table_args__ = (CheckConstraint("total_cost >= 0", name="ck_reception_total_cost_nonneg"),)


class StockReceptionItem(Base):
    __tablename__ = "stock_reception_items"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    reception_id: Mapped[int] = mapped_column(
        ForeignKey("stock_receptions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(64))
    size: Mapped[str | None] = mapped_column(String(16))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    barcode: Mapped[str | None] = mapped_column(String(96))

    reception: Mapped[StockReception] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_reception_item_qty_pos"),
        Index("ix_reception_items_reference", "reference"),
    )
