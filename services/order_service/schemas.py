from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from services.order_service.models import Order


class OrderProduct(BaseModel):
    """Product details as they were when the order was placed."""

    product_id: str
    name: str
    price: float
    image: str = ""


class OrderItemResponse(BaseModel):
    product: OrderProduct
    quantity: int
    subtotal: float


class OrderResponse(BaseModel):
    """Response model for order."""

    order_id: str
    session_id: str
    items: List[OrderItemResponse]
    subtotal: float
    shipping: float
    tax: float
    total: float
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            order_id=order.order_id,
            session_id=order.session_id,
            items=[
                OrderItemResponse(
                    product=OrderProduct(
                        product_id=item["product_id"],
                        name=item["product_name"],
                        price=item["price"],
                        image=item.get("image") or "",
                    ),
                    quantity=item["quantity"],
                    subtotal=round(item["price"] * item["quantity"], 2),
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            shipping=order.shipping,
            tax=order.tax,
            total=order.total,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class CheckoutResponse(BaseModel):
    message: str
    order: OrderResponse


class UpdateOrderStatusRequest(BaseModel):
    status: str


class OrderStats(BaseModel):
    total_orders: int
    total_revenue: float
    avg_order_value: float
    status_breakdown: Dict[str, int]
