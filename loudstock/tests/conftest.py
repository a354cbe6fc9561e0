import os

# base jetable pour toute la session de tests (jamais la base locale)
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, event, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from loudstock.app.db.base import Base
from loudstock.app.db.models.core_types import ProductKind
from loudstock.app.db.models.models_v1 import Category, Product, ProductSize
from loudstock.services.carrier import Parcel
from loudstock.services.errors import CarrierError


@pytest.fixture(scope="function")
def engine():
    """
    SQLite en mémoire, une base par test.

    pysqlite gère mal BEGIN / SAVEPOINT : on prend la main sur la transaction
    (recette documentée SQLAlchemy) pour que begin_nested() soit fiable.
    """
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(eng, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(eng, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_product(db_session):
    """
    Crée un produit catalogue.
    sizes={"M": 3} pour un produit taillé, stock=1 pour un accessoire.
    """

    def _make(name, reference, kind=ProductKind.apparel, sizes=None, stock=0, category=None):
        cat = None
        if category:
            cat = Category(name=category, slug=category.lower())
            db_session.add(cat)
            db_session.flush()

        product = Product(
            name=name,
            reference=reference,
            kind=kind,
            stock=stock,
            category_id=cat.id if cat else None,
            sizes=[ProductSize(size=s, stock=q) for s, q in (sizes or {}).items()],
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


class FakeCarrier:
    """Transporteur en mémoire : {tracking: product_list}."""

    def __init__(self, parcels=None):
        self.parcels = dict(parcels or {})
        self.calls: list[str] = []

    def get_parcel(self, tracking):
        self.calls.append(tracking)
        if tracking not in self.parcels:
            raise CarrierError(f"Parcel {tracking} not found")
        return Parcel(tracking=tracking, product_list=self.parcels[tracking])

    def is_configured(self):
        return True


@pytest.fixture
def carrier():
    return FakeCarrier()


@pytest.fixture
def robe_and_sac(make_product):
    """Catalogue du scénario de référence : Robe Ete M=3, Sac=1."""
    robe = make_product("Robe Ete", "ROBE-ETE", ProductKind.apparel, sizes={"M": 3, "L": 2})
    sac = make_product("Sac", "SAC", ProductKind.accessory, stock=1)
    return robe, sac


@pytest.fixture
def stock_of(db_session):
    """Stock relu en base : stock_of("SAC") ou stock_of("ROBE-ETE", "M")."""

    def _stock(reference, size=None):
        db_session.expire_all()
        product = db_session.execute(select(Product).where(Product.reference == reference)).scalar_one()
        if size is None:
            value = product.stock
        else:
            value = next((s.stock for s in product.sizes if s.size == size), None)
        # ne garde pas de transaction ouverte (connexion partagée avec l'API)
        db_session.commit()
        return value

    return _stock
