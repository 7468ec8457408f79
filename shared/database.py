import logging
from typing import Optional

import redis
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from shared.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.sqlalchemy_url, echo=False, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Created lazily so importing the app does not require a reachable Redis
redis_client: Optional[redis.Redis] = None


def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_redis() -> redis.Redis:
    """Get the shared Redis client used for cart storage."""
    global redis_client
    if redis_client is None:
        redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            decode_responses=True,
        )
    return redis_client


def close_redis() -> None:
    global redis_client
    if redis_client is not None:
        redis_client.close()
        redis_client = None


def init_db(bind=None) -> None:
    """Initialize database tables."""
    # Model modules register their tables on Base when imported
    from services.inventory_service import models as inventory_models  # noqa: F401
    from services.order_service import models as order_models  # noqa: F401

    logger.info("Initializing database...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database initialized")
