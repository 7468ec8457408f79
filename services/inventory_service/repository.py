import logging
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from services.inventory_service.models import Product, StockReservation

logger = logging.getLogger(__name__)


class InventoryRepository:
    """Catalog store. Stock decrements are conditional single-statement updates."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def create_product(
        self,
        name: str,
        description: str,
        price: float,
        stock: int,
        category: str,
        image: str = "",
        is_active: bool = True,
    ) -> Product:
        """Create a new product."""
        product_id = f"PROD-{uuid4().hex[:12].upper()}"
        product = Product(
            product_id=product_id,
            name=name,
            description=description,
            price=price,
            stock=stock,
            category=category,
            image=image,
            is_active=is_active,
        )
        self.db.add(product)
        self.db.flush()
        logger.info(f"Created product {product_id}: {name}, stock: {stock}")
        return product

    def get_product(self, product_id: str, refresh: bool = False) -> Optional[Product]:
        """Get product by ID. ``refresh`` reloads a product already in the session."""
        query = self.db.query(Product).filter(Product.product_id == product_id)
        if refresh:
            query = query.populate_existing()
        return query.first()

    def list_active_products(self) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.is_active.is_(True))
            .order_by(Product.created_at.desc())
            .all()
        )

    def count_products(self) -> int:
        return self.db.query(func.count(Product.id)).scalar() or 0

    def distinct_categories(self) -> List[str]:
        """Sorted categories of active products."""
        rows = self.db.query(Product.category).filter(Product.is_active.is_(True)).distinct().all()
        return sorted(row[0] for row in rows)

    def decrement_stock(self, product_id: str, quantity: int, order_id: Optional[str] = None) -> bool:
        """
        Take stock for an order.

        The stock check and the decrement are one UPDATE, so two checkouts
        racing for the last units cannot both succeed. Returns False when the
        product is missing or no longer has ``quantity`` units. Nothing is
        committed here; the caller owns the transaction.
        """
        updated = (
            self.db.query(Product)
            .filter(
                and_(
                    Product.product_id == product_id,
                    Product.stock >= quantity,
                )
            )
            .update(
                {Product.stock: Product.stock - quantity, Product.version: Product.version + 1},
                synchronize_session="fetch",
            )
        )

        if updated == 0:
            logger.warning(f"Stock decrement rejected for product {product_id}: need {quantity}")
            return False

        if order_id is not None:
            self.db.add(StockReservation(order_id=order_id, product_id=product_id, quantity=quantity))
        self.db.flush()
        logger.info(f"Decremented {quantity} units of {product_id} for order {order_id}")
        return True

    def get_reservations(self, order_id: str) -> List[StockReservation]:
        return self.db.query(StockReservation).filter(StockReservation.order_id == order_id).all()

    def get_stock_level(self, product_id: str) -> Optional[int]:
        """Get current stock level for a product."""
        product = self.get_product(product_id)
        return product.stock if product else None
