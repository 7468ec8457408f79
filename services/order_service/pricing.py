"""Order pricing and per-line checkout checks."""

from dataclasses import dataclass
from typing import Optional

from services.inventory_service.models import Product

FREE_SHIPPING_THRESHOLD = 100.0  # strictly greater than
FLAT_SHIPPING = 10.0
TAX_RATE = 0.08

PRODUCT_MISSING_ISSUE = "Product no longer exists"


@dataclass(frozen=True)
class Totals:
    subtotal: float
    shipping: float
    tax: float
    total: float


def round_money(amount: float) -> float:
    return round(amount, 2)


def compute_totals(subtotal: float) -> Totals:
    """Shipping, tax and total for a subtotal, all rounded to cents."""
    shipping = 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
    tax = round_money(subtotal * TAX_RATE)
    return Totals(
        subtotal=round_money(subtotal),
        shipping=shipping,
        tax=tax,
        total=round_money(subtotal + shipping + tax),
    )


def line_issue(product: Optional[Product], quantity: int, show_requested: bool = False) -> Optional[str]:
    """Why a cart line cannot be bought right now, or None if it can."""
    if product is None:
        return PRODUCT_MISSING_ISSUE
    if not product.is_active:
        return f"{product.name} is no longer available"
    if product.stock == 0:
        return f"{product.name} is out of stock"
    if product.stock < quantity:
        issue = f"{product.name} only has {product.stock} items in stock"
        if show_requested:
            issue += f" (requested: {quantity})"
        return issue
    return None
