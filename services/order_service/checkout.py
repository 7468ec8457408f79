"""
checkout.py - Cart validation and checkout

CHECKOUT UNIT OF WORK:
    1. Re-read the cart and every product; any failing line aborts with
       CheckoutFailedError before anything is written
    2. Insert the order (status pending) with a frozen copy of name/price/image
    3. Conditionally decrement stock per line (stock >= quantity in the same
       UPDATE) and record a stock reservation for the order
    4. Clear the session's cart in Redis, under WATCH and only if it still
       holds the lines read in step 1 (CartChangedError otherwise)
    5. Commit

    Steps 2-3 share one database transaction. If step 3 loses a race, step 4
    fails, or the commit fails, the transaction is rolled back so the order
    and every decrement disappear together. A cart cleared in step 4 gets its
    previous lines back, merged with anything added after the clear.
"""

import logging
from typing import List, Optional

import redis
from sqlalchemy.orm import Session

from services.cart_service.cart_repository import CartLineItem, CartRepository
from services.cart_service.schemas import PricedCartItem, ProductSnapshot, ValidationResult
from services.inventory_service.repository import InventoryRepository
from services.order_service.pricing import compute_totals, line_issue, round_money
from services.order_service.repository import OrderRepository
from services.order_service.schemas import CheckoutResponse, OrderResponse
from shared.errors import CartChangedError, CheckoutFailedError, EmptyCartError, NoValidItemsError

logger = logging.getLogger(__name__)


class CheckoutService:
    """Turns a session cart into a persisted, priced order."""

    def __init__(
        self,
        db: Session,
        carts: CartRepository,
        inventory: InventoryRepository,
        orders: OrderRepository,
    ):
        self.db = db
        self.carts = carts
        self.inventory = inventory
        self.orders = orders

    def validate_cart(self, session_id: str) -> ValidationResult:
        """
        Report what would block checkout right now. Read-only: per-line
        problems are collected into ``issues``; only an empty cart raises.
        """
        items = self.carts.get_items(session_id)
        if not items:
            raise EmptyCartError()

        issues: List[str] = []
        valid_items: List[PricedCartItem] = []

        for item in items:
            product = self.inventory.get_product(item.product_id)
            issue = line_issue(product, item.quantity)
            if issue:
                issues.append(issue)
                continue

            valid_items.append(
                PricedCartItem(
                    product=ProductSnapshot.model_validate(product),
                    quantity=item.quantity,
                    subtotal=round_money(product.price * item.quantity),
                )
            )

        totals = compute_totals(sum(line.product.price * line.quantity for line in valid_items))

        return ValidationResult(
            valid=not issues,
            issues=issues,
            items=valid_items,
            subtotal=totals.subtotal,
            shipping=totals.shipping,
            tax=totals.tax,
            total=totals.total,
        )

    def checkout(self, session_id: str) -> CheckoutResponse:
        """All-or-nothing checkout of the session's cart."""
        items = self.carts.get_items(session_id)
        if not items:
            raise EmptyCartError()

        issues: List[str] = []
        order_items: List[dict] = []
        subtotal = 0.0

        for item in items:
            product = self.inventory.get_product(item.product_id)
            issue = line_issue(product, item.quantity, show_requested=True)
            if issue:
                issues.append(issue)
                continue

            order_items.append(
                {
                    "product_id": product.product_id,
                    "product_name": product.name,
                    "price": product.price,
                    "quantity": item.quantity,
                    "image": product.image or "",
                }
            )
            subtotal += product.price * item.quantity

        if issues:
            logger.warning(f"Checkout rejected: {issues}", extra={"session_id": session_id})
            raise CheckoutFailedError(issues)

        if not order_items:
            raise NoValidItemsError()

        totals = compute_totals(subtotal)
        order = self._place_order(session_id, items, order_items, totals)

        logger.info(
            f"Order {order.order_id} placed: ${order.total}",
            extra={"session_id": session_id, "order_id": order.order_id},
        )
        return CheckoutResponse(message="Order placed successfully", order=OrderResponse.from_order(order))

    def _place_order(self, session_id: str, cart_items: List[CartLineItem], order_items: List[dict], totals):
        cart_cleared = False
        try:
            order = self.orders.create_order(
                session_id=session_id,
                items=order_items,
                subtotal=totals.subtotal,
                shipping=totals.shipping,
                tax=totals.tax,
                total=totals.total,
            )

            for line in order_items:
                if not self.inventory.decrement_stock(line["product_id"], line["quantity"], order.order_id):
                    raise CheckoutFailedError([self._lost_stock_issue(line)])

            self._clear_checked_out_cart(session_id, cart_items)
            cart_cleared = True
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(
                "Checkout rolled back; order and stock changes discarded",
                extra={"session_id": session_id},
            )
            if cart_cleared:
                self._restore_cart(session_id, cart_items)
            raise

        return order

    def _lost_stock_issue(self, line: dict) -> str:
        # Stock moved between validation and the conditional decrement
        product = self.inventory.get_product(line["product_id"], refresh=True)
        issue = line_issue(product, line["quantity"], show_requested=True)
        return issue or f"{line['product_name']} could not be reserved"

    def _clear_checked_out_cart(self, session_id: str, snapshot: List[CartLineItem]) -> None:
        """Empty the cart only if it still holds exactly what was priced."""

        expected = [item.model_dump() for item in snapshot]

        def _clear(current: Optional[List[CartLineItem]]) -> List[CartLineItem]:
            # Covers adds during checkout and a second checkout of the same cart
            if current is None or [item.model_dump() for item in current] != expected:
                raise CartChangedError()
            return []

        try:
            self.carts.mutate(session_id, _clear)
        except CartChangedError:
            logger.warning("Cart changed during checkout", extra={"session_id": session_id})
            raise

    def _restore_cart(self, session_id: str, items: List[CartLineItem]) -> None:
        """Put the checked-out lines back, keeping anything added since the clear."""

        def _restore(current: Optional[List[CartLineItem]]) -> List[CartLineItem]:
            restored = [item.model_copy() for item in items]
            for item in current or []:
                existing = next((line for line in restored if line.product_id == item.product_id), None)
                if existing is None:
                    restored.append(item)
                else:
                    existing.quantity += item.quantity
            return restored

        try:
            self.carts.mutate(session_id, _restore)
            logger.info("Restored cart after failed checkout", extra={"session_id": session_id})
        except redis.RedisError:
            logger.exception("Could not restore cart after failed checkout", extra={"session_id": session_id})
