import logging
from typing import Dict, List, Optional
from uuid import uuid4

from sqlalchemy import func
from sqlalchemy.orm import Session

from services.order_service.models import Order

logger = logging.getLogger(__name__)


class OrderRepository:
    """Repository for order operations."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def create_order(
        self,
        session_id: str,
        items: List[dict],
        subtotal: float,
        shipping: float,
        tax: float,
        total: float,
        status: str = "pending",
    ) -> Order:
        """Create a new order. Flushed, not committed."""
        order_id = f"ORD-{uuid4().hex[:12].upper()}"
        order = Order(
            order_id=order_id,
            session_id=session_id,
            items=items,
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=total,
            status=status,
        )
        self.db.add(order)
        self.db.flush()
        logger.info(f"Created order {order_id} for session {session_id}")
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by order_id."""
        return self.db.query(Order).filter(Order.order_id == order_id).first()

    def get_session_order(self, order_id: str, session_id: str) -> Optional[Order]:
        """Get an order only if it belongs to the session."""
        return (
            self.db.query(Order)
            .filter(Order.order_id == order_id, Order.session_id == session_id)
            .first()
        )

    def get_orders_by_session(self, session_id: str) -> List[Order]:
        """All orders of a session, newest first."""
        return (
            self.db.query(Order)
            .filter(Order.session_id == session_id)
            .order_by(Order.created_at.desc(), Order.order_id.desc())
            .all()
        )

    def update_order_status(self, order_id: str, status: str) -> Optional[Order]:
        """Update order status."""
        order = self.get_order(order_id)
        if order:
            order.status = status
            self.db.flush()
            logger.info(f"Updated order {order_id} status to {status}")
        return order

    def revenue_totals(self, session_id: Optional[str] = None):
        """(order count, revenue sum, average order total) over matching orders."""
        query = self.db.query(func.count(Order.id), func.sum(Order.total), func.avg(Order.total))
        if session_id is not None:
            query = query.filter(Order.session_id == session_id)
        count, revenue, average = query.one()
        return count or 0, revenue or 0.0, average or 0.0

    def status_counts(self, session_id: Optional[str] = None) -> Dict[str, int]:
        query = self.db.query(Order.status, func.count(Order.id))
        if session_id is not None:
            query = query.filter(Order.session_id == session_id)
        return {status: count for status, count in query.group_by(Order.status).all()}
