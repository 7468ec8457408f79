import logging
from enum import Enum
from typing import Dict, FrozenSet

from sqlalchemy.orm import Session

from services.order_service.repository import OrderRepository
from services.order_service.schemas import OrderResponse
from shared.errors import InvalidStatusTransitionError, NotFoundError

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Forward-only; delivered and cancelled are terminal
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise InvalidStatusTransitionError(f"Unknown order status {value!r}; expected one of: {allowed}")


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


class OrderStatusService:
    """Operator-driven status changes. Not scoped to a session."""

    def __init__(self, db: Session, orders: OrderRepository):
        self.db = db
        self.orders = orders

    def update_status(self, order_id: str, status: str) -> OrderResponse:
        target = parse_status(status)

        order = self.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        current = parse_status(order.status)
        if not can_transition(current, target):
            raise InvalidStatusTransitionError(
                f"Cannot move order from {current.value} to {target.value}"
            )

        if current != target:
            self.orders.update_order_status(order_id, target.value)
            self.db.commit()
            logger.info(f"Order {order_id}: {current.value} -> {target.value}", extra={"order_id": order_id})

        return OrderResponse.from_order(order)
