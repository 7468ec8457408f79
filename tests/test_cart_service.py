import pytest

from services.cart_service.cart_repository import CartLineItem
from services.cart_service.service import CartService
from services.inventory_service.models import Product
from services.inventory_service.repository import InventoryRepository
from shared.errors import InsufficientStockError, NotFoundError, ValidationError


def test_empty_cart_view(cart_service):
    view = cart_service.get_cart("s1")

    assert view.items == []
    assert view.subtotal == 0
    assert view.item_count == 0


def test_add_returns_priced_view(cart_service, make_product):
    pid = make_product(name="Lamp", price=20.0, stock=10, category="Home")

    view = cart_service.add_to_cart("s1", pid, 2)

    assert view.subtotal == 40.0
    assert view.item_count == 2
    line = view.items[0]
    assert line.product.product_id == pid
    assert line.product.name == "Lamp"
    assert line.product.category == "Home"
    assert line.quantity == 2
    assert line.subtotal == 40.0


def test_add_unknown_product(cart_service):
    with pytest.raises(NotFoundError):
        cart_service.add_to_cart("s1", "PROD-MISSING", 1)


def test_add_more_than_stock(cart_service, make_product, carts):
    pid = make_product(stock=3)

    with pytest.raises(InsufficientStockError) as exc_info:
        cart_service.add_to_cart("s1", pid, 4)

    assert exc_info.value.available == 3
    assert exc_info.value.product_id == pid
    assert carts.get_items("s1") is None


def test_add_accumulates_quantity(cart_service, make_product):
    pid = make_product(stock=5)

    cart_service.add_to_cart("s1", pid, 2)
    view = cart_service.add_to_cart("s1", pid, 3)

    assert len(view.items) == 1
    assert view.items[0].quantity == 5


def test_accumulated_quantity_rechecked_against_stock(cart_service, make_product, carts):
    pid = make_product(stock=4)
    cart_service.add_to_cart("s1", pid, 2)

    with pytest.raises(InsufficientStockError, match="Cannot add more"):
        cart_service.add_to_cart("s1", pid, 3)

    assert [(i.product_id, i.quantity) for i in carts.get_items("s1")] == [(pid, 2)]


@pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True, None])
def test_rejects_malformed_quantity(cart_service, make_product, quantity):
    pid = make_product()

    with pytest.raises(ValidationError):
        cart_service.add_to_cart("s1", pid, quantity)
    with pytest.raises(ValidationError):
        cart_service.update_cart_item("s1", pid, quantity)


def test_update_replaces_quantity(cart_service, make_product):
    pid = make_product(stock=10)
    cart_service.add_to_cart("s1", pid, 2)

    view = cart_service.update_cart_item("s1", pid, 7)

    assert view.items[0].quantity == 7
    assert view.item_count == 7


def test_update_without_cart(cart_service, make_product):
    pid = make_product()

    with pytest.raises(NotFoundError, match="Cart not found"):
        cart_service.update_cart_item("s1", pid, 1)


def test_update_product_not_in_cart(cart_service, make_product):
    in_cart = make_product(name="A")
    other = make_product(name="B")
    cart_service.add_to_cart("s1", in_cart, 1)

    with pytest.raises(NotFoundError, match="Item not found in cart"):
        cart_service.update_cart_item("s1", other, 1)


def test_update_product_deleted_from_catalog(cart_service, make_product, db):
    pid = make_product()
    cart_service.add_to_cart("s1", pid, 1)
    db.query(Product).filter(Product.product_id == pid).delete()
    db.commit()

    with pytest.raises(NotFoundError, match="Product not found"):
        cart_service.update_cart_item("s1", pid, 1)


def test_update_beyond_stock(cart_service, make_product, carts):
    pid = make_product(stock=3)
    cart_service.add_to_cart("s1", pid, 1)

    with pytest.raises(InsufficientStockError):
        cart_service.update_cart_item("s1", pid, 4)

    assert carts.get_items("s1")[0].quantity == 1


def test_remove_line(cart_service, make_product):
    a = make_product(name="A", price=10.0)
    b = make_product(name="B", price=5.0)
    cart_service.add_to_cart("s1", a, 1)
    cart_service.add_to_cart("s1", b, 2)

    view = cart_service.remove_from_cart("s1", a)

    assert [line.product.product_id for line in view.items] == [b]
    assert view.subtotal == 10.0


def test_remove_absent_product_is_noop(cart_service, make_product):
    pid = make_product()
    cart_service.add_to_cart("s1", pid, 1)

    view = cart_service.remove_from_cart("s1", "PROD-NOT-IN-CART")

    assert view.item_count == 1


def test_remove_without_cart(cart_service):
    with pytest.raises(NotFoundError):
        cart_service.remove_from_cart("s1", "PROD-ANY")


def test_clear_is_idempotent(cart_service, make_product):
    pid = make_product()
    cart_service.add_to_cart("s1", pid, 1)

    first = cart_service.clear_cart("s1")
    second = cart_service.clear_cart("s1")

    for result in (first, second):
        assert result["items"] == []
        assert result["subtotal"] == 0
        assert result["item_count"] == 0
    assert cart_service.get_cart("s1").items == []


def test_vanished_product_dropped_from_view(cart_service, make_product, carts):
    a = make_product(name="A", price=12.5, stock=5)
    carts.save_items("s1", [CartLineItem(product_id=a, quantity=2), CartLineItem(product_id="PROD-GONE", quantity=1)])

    view = cart_service.get_cart("s1")

    assert [line.product.product_id for line in view.items] == [a]
    assert view.subtotal == 25.0
    assert view.item_count == 2


def test_view_uses_current_price(cart_service, make_product, db):
    pid = make_product(price=10.0)
    cart_service.add_to_cart("s1", pid, 3)
    db.query(Product).filter(Product.product_id == pid).update({Product.price: 12.0})
    db.commit()

    assert cart_service.get_cart("s1").subtotal == 36.0


def test_carts_are_per_session(cart_service, make_product):
    pid = make_product()
    cart_service.add_to_cart("alice", pid, 1)

    assert cart_service.get_cart("bob").items == []


class ShrinkingInventory(InventoryRepository):
    """After the first read, stock drops and another request rewrites the cart."""

    def __init__(self, db, carts, session_id, new_stock):
        super().__init__(db)
        self.carts = carts
        self.session_id = session_id
        self.new_stock = new_stock
        self.reads = 0

    def get_product(self, product_id, refresh=False):
        product = super().get_product(product_id, refresh=refresh)
        self.reads += 1
        if self.reads == 1:
            self.db.query(Product).filter(Product.product_id == product_id).update(
                {Product.stock: self.new_stock}, synchronize_session=False
            )
            self.carts.save_items(self.session_id, self.carts.get_items(self.session_id))
        return product


def test_add_retry_rechecks_current_stock(db, carts, make_product):
    pid = make_product(stock=5)
    carts.save_items("s1", [CartLineItem(product_id=pid, quantity=2)])
    inventory = ShrinkingInventory(db, carts, "s1", new_stock=4)
    service = CartService(carts, inventory)

    with pytest.raises(InsufficientStockError, match="Only 4 items in stock") as exc_info:
        service.add_to_cart("s1", pid, 3)

    assert exc_info.value.available == 4
    assert inventory.reads == 2
    assert [(i.product_id, i.quantity) for i in carts.get_items("s1")] == [(pid, 2)]
