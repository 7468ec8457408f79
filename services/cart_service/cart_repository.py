"""
Cart Repository Module

Redis persistence for session carts. A cart holds unpriced line items only;
prices are joined in from the catalog every time a cart is read.

Data Format (Redis):
    Key: "cart:{session_id}"
    Value: '{
        "session_id": "default-session",
        "items": [
            {"product_id": "PROD-1A2B3C4D5E6F", "quantity": 2},
            {"product_id": "PROD-9F8E7D6C5B4A", "quantity": 1}
        ],
        "updated_at": "2026-02-23T22:48:51.001014+00:00"
    }'

A missing key means the session has no cart yet. Clearing a cart stores an
empty item list rather than deleting the key.

Concurrency:
    ``mutate`` runs a read-modify-write under WATCH/MULTI on the cart key.
    If another request writes the same cart in between, Redis aborts the
    MULTI and the whole function is re-run against the fresh cart, so two
    concurrent adds for one session cannot lose an update.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

import redis
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class CartLineItem(BaseModel):
    """Cart line item model."""

    product_id: str
    quantity: int = Field(gt=0)


CartMutation = Callable[[Optional[List[CartLineItem]]], List[CartLineItem]]


class CartRepository:
    """Repository for managing shopping carts in Redis."""

    CART_KEY_PREFIX = "cart:"

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = 0):
        """Initialize cart repository. ``ttl_seconds`` of 0 disables expiry."""
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    def get_items(self, session_id: str) -> Optional[List[CartLineItem]]:
        """Line items in cart order, or None if the session has no cart."""
        return self._decode(self.redis.get(self._key(session_id)))

    def mutate(self, session_id: str, apply: CartMutation) -> List[CartLineItem]:
        """
        Atomically replace a cart's items with ``apply(current_items)``.

        ``apply`` receives None when no cart exists and may raise to abort
        without writing. It can run more than once on write conflicts.
        """
        cart_key = self._key(session_id)
        result: List[List[CartLineItem]] = []

        def _transaction(pipe: redis.client.Pipeline) -> None:
            current = self._decode(pipe.get(cart_key))
            updated = apply(current)
            pipe.multi()
            self._write(pipe, session_id, updated)
            result[:] = [updated]

        self.redis.transaction(_transaction, cart_key)
        return result[0]

    def save_items(self, session_id: str, items: List[CartLineItem]) -> None:
        """Overwrite a cart unconditionally."""
        self._write(self.redis, session_id, items)
        logger.info(f"Saved {len(items)} line items for session {session_id}")

    def clear_cart(self, session_id: str) -> None:
        """Empty the session's cart."""
        self._write(self.redis, session_id, [])
        logger.info(f"Cleared cart for session {session_id}")

    def _key(self, session_id: str) -> str:
        return f"{self.CART_KEY_PREFIX}{session_id}"

    def _write(self, client, session_id: str, items: List[CartLineItem]) -> None:
        payload = {
            "session_id": session_id,
            "items": [item.model_dump() for item in items],
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        ex = self.ttl_seconds if self.ttl_seconds > 0 else None
        client.set(self._key(session_id), json.dumps(payload), ex=ex)

    @staticmethod
    def _decode(cart_json) -> Optional[List[CartLineItem]]:
        if cart_json is None:
            return None
        if isinstance(cart_json, bytes):
            cart_json = cart_json.decode("utf-8")
        data = json.loads(cart_json)
        return [CartLineItem(**item) for item in data.get("items", [])]
