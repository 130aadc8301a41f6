# tests/conftest.py
import os

# przed importem basket_service (settings czytane przy imporcie)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from dataclasses import replace
from datetime import datetime, timezone, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from basket_service.api.deps import get_catalog, get_lock_service
from basket_service.data.database import Base, get_db
from basket_service.data.models import CouponModel
from basket_service.domain.errors import CatalogUnavailable
from basket_service.domain.pricing import CatalogEntry
from basket_service.repos.coupon_repo import CouponRepo
from basket_service.services.basket_service import BasketService
from basket_service.services.lock_service import LockService


class InMemoryCatalog:
    """Katalog testowy: id -> CatalogEntry, opcjonalnie symulowana awaria."""

    def __init__(self, entries=None):
        self.entries = dict(entries or {})
        self.fail = False
        self.calls = []

    def lookup(self, product_ids):
        self.calls.append(set(product_ids))
        if self.fail:
            raise CatalogUnavailable("catalog down")
        return {pid: self.entries[pid] for pid in product_ids if pid in self.entries}

    def unpublish(self, product_id):
        self.entries[product_id] = replace(self.entries[product_id], is_published=False)


class InMemoryRedis:
    """Tylko SET NX EX i EVAL skryptu compare-and-delete uzywane przez LockService."""

    def __init__(self):
        self.store = {}

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def eval(self, script, numkeys, *keys_and_args):
        key, token = keys_and_args[0], keys_and_args[1]
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog():
    return InMemoryCatalog(
        {
            1: CatalogEntry(price=Decimal("100.00")),
            2: CatalogEntry(price=Decimal("50.00"), discount_price=Decimal("40.00")),
            3: CatalogEntry(price=Decimal("75.50"), is_published=False),
            4: CatalogEntry(price=Decimal("30.00"), is_active=False),
        }
    )


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


@pytest.fixture
def lock_service(fake_redis):
    return LockService(client=fake_redis)


@pytest.fixture
def service(db, catalog, lock_service):
    return BasketService(db=db, catalog=catalog, lock_service=lock_service)


@pytest.fixture
def make_coupon(db):
    def _make(code="SAVE20", discount_type="amount", discount_value="20", **kwargs):
        now = datetime.now(timezone.utc)
        fields = {
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=1),
            "used_count": 0,
            "is_active": True,
            **kwargs,
        }
        return CouponRepo(db).create_coupon(
            CouponModel(
                code=code,
                discount_type=discount_type,
                discount_value=Decimal(discount_value),
                **fields,
            )
        )

    return _make


@pytest.fixture
def client(session_factory, catalog, lock_service):
    from basket_service.main import create_app

    app = create_app(create_tables=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_lock_service] = lambda: lock_service

    with TestClient(app) as c:
        yield c
