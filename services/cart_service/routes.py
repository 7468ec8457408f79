"""Cart API routes"""

from fastapi import APIRouter, Depends

from services.cart_service.schemas import (
    AddToCartRequest,
    CartView,
    ClearCartResponse,
    UpdateCartItemRequest,
    ValidationResult,
)
from services.cart_service.service import CartService
from services.dependencies import get_cart_service, get_checkout_service, to_http_error
from services.order_service.checkout import CheckoutService
from shared.errors import StorefrontError
from shared.session import get_session_id

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartView)
def get_cart(
    session_id: str = Depends(get_session_id),
    carts: CartService = Depends(get_cart_service),
):
    """Get cart contents with current prices"""
    return carts.get_cart(session_id)


@router.post("/add", response_model=CartView, status_code=201)
def add_to_cart(
    request: AddToCartRequest,
    session_id: str = Depends(get_session_id),
    carts: CartService = Depends(get_cart_service),
):
    """Add a product to the cart"""
    try:
        return carts.add_to_cart(session_id, request.product_id, request.quantity)
    except StorefrontError as e:
        raise to_http_error(e)


@router.patch("/update", response_model=CartView)
def update_cart_item(
    request: UpdateCartItemRequest,
    session_id: str = Depends(get_session_id),
    carts: CartService = Depends(get_cart_service),
):
    """Set the quantity of a product already in the cart"""
    try:
        return carts.update_cart_item(session_id, request.product_id, request.quantity)
    except StorefrontError as e:
        raise to_http_error(e)


@router.delete("/remove/{product_id}", response_model=CartView)
def remove_from_cart(
    product_id: str,
    session_id: str = Depends(get_session_id),
    carts: CartService = Depends(get_cart_service),
):
    """Remove a product from the cart"""
    try:
        return carts.remove_from_cart(session_id, product_id)
    except StorefrontError as e:
        raise to_http_error(e)


@router.delete("/clear", response_model=ClearCartResponse)
def clear_cart(
    session_id: str = Depends(get_session_id),
    carts: CartService = Depends(get_cart_service),
):
    """Clear all items from cart"""
    return carts.clear_cart(session_id)


@router.post("/validate", response_model=ValidationResult)
def validate_cart(
    session_id: str = Depends(get_session_id),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Check the cart against current stock without changing anything"""
    try:
        return checkout.validate_cart(session_id)
    except StorefrontError as e:
        raise to_http_error(e)
