"""Domain errors raised by the cart, checkout and order services.

Routers turn these into ``HTTPException`` using ``status_code`` and
``to_detail()``.
"""

from typing import Any, Dict, List, Optional


class StorefrontError(Exception):
    """Base error for storefront operations."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Any:
        return self.message


class NotFoundError(StorefrontError):
    """Product, cart, cart line or order missing (or owned by another session)."""

    status_code = 404


class InsufficientStockError(StorefrontError):
    """Requested quantity exceeds current stock."""

    def __init__(self, message: str, product_id: str, available: int):
        super().__init__(message)
        self.product_id = product_id
        self.available = available

    def to_detail(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "product_id": self.product_id,
            "available": self.available,
        }


class EmptyCartError(StorefrontError):
    """Cart has no line items."""

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class NoValidItemsError(StorefrontError):
    """Cart has items but none survived validation."""

    def __init__(self, message: str = "No valid items in cart"):
        super().__init__(message)


class CheckoutFailedError(StorefrontError):
    """One or more line items failed validation at checkout."""

    def __init__(self, issues: List[str], message: str = "Some items could not be processed"):
        super().__init__(message)
        self.issues = list(issues)

    def to_detail(self) -> Dict[str, Any]:
        return {"message": self.message, "issues": self.issues}


class ValidationError(StorefrontError):
    """Malformed input such as a non-positive quantity."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors

    def to_detail(self) -> Any:
        if self.errors is None:
            return self.message
        return {"message": self.message, "errors": self.errors}


class InvalidStatusTransitionError(ValidationError):
    """Order status change not allowed by the order lifecycle."""


class CartChangedError(StorefrontError):
    """Cart was modified while a checkout of it was in progress."""

    status_code = 409

    def __init__(self, message: str = "Cart changed during checkout, review it and try again"):
        super().__init__(message)
