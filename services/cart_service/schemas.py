from typing import List

from pydantic import BaseModel, ConfigDict, Field


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""

    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0, strict=True)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity"""

    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0, strict=True)


class ProductSnapshot(BaseModel):
    """Catalog fields joined into a cart line at read time."""

    model_config = ConfigDict(from_attributes=True)

    product_id: str
    name: str
    price: float
    stock: int
    category: str
    image: str = ""


class PricedCartItem(BaseModel):
    product: ProductSnapshot
    quantity: int
    subtotal: float


class CartView(BaseModel):
    """Priced cart view."""

    items: List[PricedCartItem] = []
    subtotal: float = 0.0
    item_count: int = 0


class ClearCartResponse(CartView):
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating a cart against the current catalog."""

    valid: bool
    issues: List[str]
    items: List[PricedCartItem]
    subtotal: float
    shipping: float
    tax: float
    total: float
