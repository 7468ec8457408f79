import pytest
from sqlalchemy.exc import IntegrityError

from services.inventory_service.models import Product
from services.inventory_service.seed_data import SAMPLE_PRODUCTS, seed_products


def test_decrement_takes_stock(inventory, make_product, db):
    pid = make_product(stock=5)

    assert inventory.decrement_stock(pid, 3, "ORD-1") is True
    db.commit()

    product = inventory.get_product(pid)
    assert product.stock == 2
    assert product.version == 1
    assert [(r.product_id, r.quantity) for r in inventory.get_reservations("ORD-1")] == [(pid, 3)]


def test_decrement_never_oversells(inventory, make_product, db):
    pid = make_product(stock=2)

    assert inventory.decrement_stock(pid, 3) is False
    assert inventory.decrement_stock(pid, 2) is True
    assert inventory.decrement_stock(pid, 1) is False
    db.commit()

    assert inventory.get_stock_level(pid) == 0


def test_decrement_unknown_product(inventory):
    assert inventory.decrement_stock("PROD-MISSING", 1) is False
    assert inventory.get_stock_level("PROD-MISSING") is None


def test_stock_cannot_go_negative(make_product, db):
    pid = make_product(stock=1)

    with pytest.raises(IntegrityError):
        db.query(Product).filter(Product.product_id == pid).update({Product.stock: -1})
        db.flush()
    db.rollback()


def test_categories_of_active_products(inventory, make_product):
    make_product(category="Home")
    make_product(category="Books")
    make_product(category="Home")
    make_product(category="Garden", is_active=False)

    assert inventory.distinct_categories() == ["Books", "Home"]


def test_list_active_products(inventory, make_product):
    shown = make_product(name="Shown")
    make_product(name="Hidden", is_active=False)

    assert [p.product_id for p in inventory.list_active_products()] == [shown]


def test_seed_only_fills_empty_catalog(db, inventory):
    assert seed_products(db) == len(SAMPLE_PRODUCTS)
    assert seed_products(db) == 0
    assert inventory.count_products() == len(SAMPLE_PRODUCTS)
    assert "Sports" in inventory.distinct_categories()
