"""
logging_config.py - Centralized JSON Logging Configuration

PURPOSE:
    Provides structured JSON logging for the storefront with timezone-aware
    timestamps and request context (session, order, correlation id).

JSON LOG FIELDS:
    - timestamp: ISO 8601 in the configured timezone (default America/Los_Angeles)
    - level: Log level (INFO, ERROR, WARNING, DEBUG, CRITICAL)
    - logger: Module where the log originated (e.g. "services.order_service.checkout")
    - message: The actual log message
    - service_name: Injected automatically by ServiceFilter
    - session_id / order_id / correlation_id: Optional, passed through ``extra``
    - exception: Full stack trace when exc_info is set

USAGE:
    from shared.logging_config import setup_logging
    setup_logging("storefront-service", level="INFO")

    logger = logging.getLogger(__name__)
    logger.info("Order placed", extra={"session_id": "abc", "order_id": "ORD-1"})

EXAMPLE JSON OUTPUT:
    {
        "timestamp": "2026-02-23T22:48:51.001014-08:00",
        "level": "INFO",
        "logger": "services.order_service.checkout",
        "message": "Order ORD-4F1A2B3C4D5E placed: $53.2",
        "service_name": "storefront-service",
        "session_id": "default-session",
        "order_id": "ORD-4F1A2B3C4D5E"
    }
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo

CONTEXT_FIELDS = ("service_name", "session_id", "order_id", "correlation_id")


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs JSON logs with request context."""

    def __init__(self, tz_name: str = "America/Los_Angeles"):
        super().__init__()
        self.tz = ZoneInfo(tz_name)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, self.tz).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ServiceFilter(logging.Filter):
    """Add service name to all logs."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(service_name: str, level: str = "INFO", tz_name: str = "America/Los_Angeles") -> None:
    """Setup JSON logging for a service. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if isinstance(handler.formatter, JsonFormatter):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(tz_name))
    # Handler-level filter so records from child loggers get the service name too
    handler.addFilter(ServiceFilter(service_name))
    root.addHandler(handler)
