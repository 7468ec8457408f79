import os

# Must be set before shared.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_CATALOG", "false")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from services.cart_service.cart_repository import CartRepository
from services.cart_service.service import CartService
from services.inventory_service.repository import InventoryRepository
from services.order_service.checkout import CheckoutService
from services.order_service.queries import OrderQueries
from services.order_service.repository import OrderRepository
from services.order_service.status import OrderStatusService
from shared.database import get_db, get_redis, init_db


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def carts(redis_client):
    return CartRepository(redis_client)


@pytest.fixture
def inventory(db):
    return InventoryRepository(db)


@pytest.fixture
def orders(db):
    return OrderRepository(db)


@pytest.fixture
def cart_service(carts, inventory):
    return CartService(carts, inventory)


@pytest.fixture
def checkout_service(db, carts, inventory, orders):
    return CheckoutService(db, carts, inventory, orders)


@pytest.fixture
def order_queries(orders):
    return OrderQueries(orders)


@pytest.fixture
def status_service(db, orders):
    return OrderStatusService(db, orders)


@pytest.fixture
def make_product(db, inventory):
    def _make(name="Widget", price=20.0, stock=10, category="Misc", image="", is_active=True):
        product = inventory.create_product(
            name=name,
            description=f"{name} description",
            price=price,
            stock=stock,
            category=category,
            image=image,
            is_active=is_active,
        )
        db.commit()
        return product.product_id

    return _make


@pytest.fixture
def client(session_factory, redis_client):
    from services.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_redis] = lambda: redis_client
    yield TestClient(app)
    app.dependency_overrides.clear()
