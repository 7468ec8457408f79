import os
from typing import Optional

from pydantic_settings import BaseSettings  # Configuration management


class Settings(BaseSettings):
    """Application settings."""

    postgres_user: str = os.getenv("POSTGRES_USER", "postgres")
    postgres_password: str = os.getenv("POSTGRES_PASSWORD", "postgres")
    postgres_host: str = os.getenv("POSTGRES_HOST", "localhost")
    postgres_port: str = os.getenv("POSTGRES_PORT", "5432")
    postgres_db: str = os.getenv("POSTGRES_DB", "storefront")
    # Full SQLAlchemy URL, takes precedence over the POSTGRES_* parts when set
    database_url: Optional[str] = os.getenv("DATABASE_URL")

    redis_host: str = os.getenv("REDIS_HOST", "localhost")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_db: int = int(os.getenv("REDIS_DB", "0"))
    # 0 keeps carts until they are cleared
    cart_ttl_seconds: int = int(os.getenv("CART_TTL_SECONDS", "0"))

    storefront_service_port: int = int(os.getenv("STOREFRONT_SERVICE_PORT", "8000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_timezone: str = os.getenv("LOG_TIMEZONE", "America/Los_Angeles")
    seed_catalog: bool = os.getenv("SEED_CATALOG", "true").lower() == "true"

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
