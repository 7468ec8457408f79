"""
services/main.py - Storefront API

PURPOSE:
    Session-scoped shopping cart, checkout and order history over a product
    catalog with finite stock.

RESPONSIBILITIES:
    - Keep one cart per session in Redis, validated against live stock
    - Validate carts and check them out into immutable, priced orders
    - Decrement stock atomically so concurrent sessions cannot oversell
    - Query orders per session and aggregate order statistics

API ENDPOINTS:
    GET    /cart                        - Priced cart view
    POST   /cart/add                    - Add product (accumulates quantity)
    PATCH  /cart/update                 - Set quantity of a cart line
    DELETE /cart/remove/{product_id}    - Remove a cart line
    DELETE /cart/clear                  - Empty the cart
    POST   /cart/validate               - Report blocking issues, read-only
    POST   /orders/checkout             - Place an order from the cart
    GET    /orders                      - Session's orders, newest first
    GET    /orders/stats                - Order statistics
    GET    /orders/{order_id}           - One of the session's orders
    PATCH  /orders/{order_id}/status    - Advance order status
    GET    /products                    - Active catalog
    GET    /products/categories         - Catalog categories
    GET    /products/{product_id}       - Product details
    GET    /health                      - Health check endpoint

SESSIONS:
    The X-Session-Id header selects the cart and order history. Requests
    without it share DEFAULT_SESSION_ID.

DATA STORAGE:
    - PostgreSQL: products, stock_reservations, orders
    - Redis: carts (key: "cart:{session_id}")

TESTING COMMANDS:
    1. Health Check:
        curl http://localhost:8000/health

    2. Add 2 units of a product:
        curl -X POST http://localhost:8000/cart/add \
          -H "X-Session-Id: alice" -H "Content-Type: application/json" \
          -d '{"product_id": "PROD-1A2B3C4D5E6F", "quantity": 2}'

    3. Validate, then check out:
        curl -X POST http://localhost:8000/cart/validate -H "X-Session-Id: alice"
        curl -X POST http://localhost:8000/orders/checkout -H "X-Session-Id: alice"

USAGE:
    uvicorn services.main:app --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from services.cart_service.routes import router as cart_router
from services.inventory_service.routes import router as products_router
from services.order_service.routes import router as orders_router
from shared.config import settings
from shared.database import SessionLocal, close_redis, get_redis, init_db
from shared.logging_config import setup_logging

SERVICE_NAME = "storefront-service"
VERSION = "1.0.0"

# Setup logging
setup_logging(SERVICE_NAME, level=settings.log_level, tz_name=settings.log_timezone)
logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str
    version: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    logger.info("Starting Storefront Service...")

    # Initialize database
    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    # Seed products
    if settings.seed_catalog:
        from services.inventory_service.seed_data import seed_products

        db = SessionLocal()
        try:
            seed_products(db)
        except Exception as e:
            logger.error(f"Failed to seed products: {e}")
        finally:
            db.close()

    # Initialize Redis
    try:
        get_redis().ping()
        logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Failed to connect to Redis: {e}")
        raise

    yield   # Application is now ready to handle requests

    logger.info("Shutting down Storefront Service...")
    close_redis()


app = FastAPI(title="Storefront Service", version=VERSION, lifespan=lifespan)

app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies (e.g. a non-positive quantity) are client errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"message": "Invalid request", "errors": jsonable_encoder(exc.errors())}},
    )


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", service=SERVICE_NAME, version=VERSION)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.storefront_service_port)
