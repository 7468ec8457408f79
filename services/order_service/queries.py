"""Read-only order queries, always scoped by session except global stats."""

from typing import List, Optional

from services.order_service.pricing import round_money
from services.order_service.repository import OrderRepository
from services.order_service.schemas import OrderResponse, OrderStats
from shared.errors import NotFoundError


class OrderQueries:
    def __init__(self, orders: OrderRepository):
        self.orders = orders

    def find_all(self, session_id: str) -> List[OrderResponse]:
        return [OrderResponse.from_order(order) for order in self.orders.get_orders_by_session(session_id)]

    def find_one(self, order_id: str, session_id: str) -> OrderResponse:
        # Another session's order is reported exactly like a missing one
        order = self.orders.get_session_order(order_id, session_id)
        if not order:
            raise NotFoundError("Order not found")
        return OrderResponse.from_order(order)

    def get_stats(self, session_id: Optional[str] = None) -> OrderStats:
        """Totals over one session's orders, or over all orders when no session is given."""
        count, revenue, average = self.orders.revenue_totals(session_id)
        return OrderStats(
            total_orders=count,
            total_revenue=round_money(revenue),
            avg_order_value=round_money(average),
            status_breakdown=self.orders.status_counts(session_id),
        )
