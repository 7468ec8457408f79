"""FastAPI dependency wiring for the storefront services."""

import redis
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from services.cart_service.cart_repository import CartRepository
from services.cart_service.service import CartService
from services.inventory_service.repository import InventoryRepository
from services.order_service.checkout import CheckoutService
from services.order_service.queries import OrderQueries
from services.order_service.repository import OrderRepository
from services.order_service.status import OrderStatusService
from shared.config import settings
from shared.database import get_db, get_redis
from shared.errors import StorefrontError


def to_http_error(exc: StorefrontError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_detail())


def get_cart_repository(redis_client: redis.Redis = Depends(get_redis)) -> CartRepository:
    return CartRepository(redis_client, ttl_seconds=settings.cart_ttl_seconds)


def get_cart_service(
    db: Session = Depends(get_db),
    carts: CartRepository = Depends(get_cart_repository),
) -> CartService:
    return CartService(carts, InventoryRepository(db))


def get_checkout_service(
    db: Session = Depends(get_db),
    carts: CartRepository = Depends(get_cart_repository),
) -> CheckoutService:
    return CheckoutService(db, carts, InventoryRepository(db), OrderRepository(db))


def get_order_queries(db: Session = Depends(get_db)) -> OrderQueries:
    return OrderQueries(OrderRepository(db))


def get_order_status_service(db: Session = Depends(get_db)) -> OrderStatusService:
    return OrderStatusService(db, OrderRepository(db))
