import logging
from typing import List, Optional

from services.cart_service.cart_repository import CartLineItem, CartRepository
from services.cart_service.schemas import CartView, PricedCartItem, ProductSnapshot
from services.inventory_service.repository import InventoryRepository
from services.order_service.pricing import round_money
from shared.errors import InsufficientStockError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def check_quantity(quantity) -> int:
    """Reject anything but a positive int before touching the cart."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Quantity must be an integer, got {quantity!r}")
    if quantity < 1:
        raise ValidationError(f"Quantity must be at least 1, got {quantity}")
    return quantity


class CartService:
    """Session carts validated against live catalog stock."""

    def __init__(self, carts: CartRepository, inventory: InventoryRepository):
        self.carts = carts
        self.inventory = inventory

    def get_cart(self, session_id: str) -> CartView:
        """Priced view of the cart. Lines whose product is gone are left out."""
        items = self.carts.get_items(session_id)
        if not items:
            return CartView()
        return self._price(items)

    def add_to_cart(self, session_id: str, product_id: str, quantity: int) -> CartView:
        check_quantity(quantity)

        def _add(current: Optional[List[CartLineItem]]) -> List[CartLineItem]:
            # Re-read on every attempt; a WATCH retry must not see stale stock
            product = self.inventory.get_product(product_id, refresh=True)
            if not product:
                raise NotFoundError("Product not found")
            if quantity > product.stock:
                raise InsufficientStockError(
                    f"Only {product.stock} items available in stock",
                    product_id=product_id,
                    available=product.stock,
                )

            items = [item.model_copy() for item in current or []]
            existing = next((item for item in items if item.product_id == product_id), None)
            if existing is None:
                items.append(CartLineItem(product_id=product_id, quantity=quantity))
                return items

            new_quantity = existing.quantity + quantity
            if new_quantity > product.stock:
                raise InsufficientStockError(
                    f"Cannot add more. Only {product.stock} items in stock",
                    product_id=product_id,
                    available=product.stock,
                )
            existing.quantity = new_quantity
            return items

        try:
            items = self.carts.mutate(session_id, _add)
        except InsufficientStockError as e:
            logger.warning(
                f"Rejected add of {quantity}x {product_id}: only {e.available} in stock",
                extra={"session_id": session_id},
            )
            raise

        logger.info(f"Added {quantity}x {product_id} to cart", extra={"session_id": session_id})
        return self._price(items)

    def update_cart_item(self, session_id: str, product_id: str, quantity: int) -> CartView:
        check_quantity(quantity)

        def _update(current: Optional[List[CartLineItem]]) -> List[CartLineItem]:
            if current is None:
                raise NotFoundError("Cart not found")

            items = [item.model_copy() for item in current]
            item = next((item for item in items if item.product_id == product_id), None)
            if item is None:
                raise NotFoundError("Item not found in cart")

            product = self.inventory.get_product(product_id, refresh=True)
            if not product:
                raise NotFoundError("Product not found")
            if quantity > product.stock:
                raise InsufficientStockError(
                    f"Only {product.stock} items available in stock",
                    product_id=product_id,
                    available=product.stock,
                )

            item.quantity = quantity
            return items

        items = self.carts.mutate(session_id, _update)
        logger.info(f"Set {product_id} quantity to {quantity}", extra={"session_id": session_id})
        return self._price(items)

    def remove_from_cart(self, session_id: str, product_id: str) -> CartView:
        """Drop a line. Removing a product that is not in the cart is a no-op."""

        def _remove(current: Optional[List[CartLineItem]]) -> List[CartLineItem]:
            if current is None:
                raise NotFoundError("Cart not found")
            return [item for item in current if item.product_id != product_id]

        items = self.carts.mutate(session_id, _remove)
        logger.info(f"Removed {product_id} from cart", extra={"session_id": session_id})
        return self._price(items)

    def clear_cart(self, session_id: str) -> dict:
        self.carts.clear_cart(session_id)
        return {"message": "Cart cleared successfully", **CartView().model_dump()}

    def _price(self, items: List[CartLineItem]) -> CartView:
        priced: List[PricedCartItem] = []
        for item in items:
            product = self.inventory.get_product(item.product_id)
            if product is None:
                continue
            priced.append(
                PricedCartItem(
                    product=ProductSnapshot.model_validate(product),
                    quantity=item.quantity,
                    subtotal=round_money(product.price * item.quantity),
                )
            )

        return CartView(
            items=priced,
            subtotal=round_money(sum(line.product.price * line.quantity for line in priced)),
            item_count=sum(line.quantity for line in priced),
        )
