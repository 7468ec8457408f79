from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, Integer, String, Uuid, func

from shared.database import Base


class Product(Base):
    """Catalog product. Stock only ever moves through InventoryRepository."""

    __tablename__ = "products"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    product_id = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category = Column(String(100), nullable=False, index=True)
    image = Column(String(500), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class StockReservation(Base):
    """Stock taken from a product by a placed order."""

    __tablename__ = "stock_reservations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    order_id = Column(String(255), nullable=False, index=True)
    product_id = Column(String(255), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
