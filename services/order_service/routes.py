"""Order API routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from services.dependencies import (
    get_checkout_service,
    get_order_queries,
    get_order_status_service,
    to_http_error,
)
from services.order_service.checkout import CheckoutService
from services.order_service.queries import OrderQueries
from services.order_service.schemas import (
    CheckoutResponse,
    OrderResponse,
    OrderStats,
    UpdateOrderStatusRequest,
)
from services.order_service.status import OrderStatusService
from shared.errors import StorefrontError
from shared.session import get_optional_session_id, get_session_id

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    session_id: str = Depends(get_session_id),
    checkout_service: CheckoutService = Depends(get_checkout_service),
):
    """
    Checkout and create an order from the cart.

    Fails with 400 and the full ``issues`` list if any line is unavailable;
    nothing is written in that case.
    """
    try:
        return checkout_service.checkout(session_id)
    except StorefrontError as e:
        raise to_http_error(e)


@router.get("", response_model=List[OrderResponse])
def list_orders(
    session_id: str = Depends(get_session_id),
    queries: OrderQueries = Depends(get_order_queries),
):
    """Get all orders for the current session"""
    return queries.find_all(session_id)


@router.get("/stats", response_model=OrderStats)
def get_stats(
    session_id: Optional[str] = Depends(get_optional_session_id),
    queries: OrderQueries = Depends(get_order_queries),
):
    """Order statistics for the session, or for all orders without a session header"""
    return queries.get_stats(session_id)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    session_id: str = Depends(get_session_id),
    queries: OrderQueries = Depends(get_order_queries),
):
    """Get order by ID"""
    try:
        return queries.find_one(order_id, session_id)
    except StorefrontError as e:
        raise to_http_error(e)


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    status_service: OrderStatusService = Depends(get_order_status_service),
):
    """Update order status (operator action)"""
    try:
        return status_service.update_status(order_id, request.status)
    except StorefrontError as e:
        raise to_http_error(e)
