from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, Float, String, Uuid, func

from shared.database import Base


class Order(Base):
    """Placed order. Items are a frozen copy of the catalog at purchase time."""

    __tablename__ = "orders"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    order_id = Column(String(255), unique=True, nullable=False, index=True)
    session_id = Column(String(255), nullable=False, index=True)
    status = Column(String(50), default="pending", nullable=False, index=True)  # see status.OrderStatus
    # [{"product_id", "product_name", "price", "quantity", "image"}]
    items = Column(JSON, nullable=False)
    subtotal = Column(Float, nullable=False)
    shipping = Column(Float, nullable=False)
    tax = Column(Float, nullable=False)
    total = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
