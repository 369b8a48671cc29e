# tiffin/services/order_guard.py
import hashlib
import json
from typing import Iterable

import redis

from tiffin.utils.retry import redis_retry
from tiffin.utils.settings import REDIS_URL
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)

PROCESSING = "processing"
COMPLETED = "completed"


def serialize_cart(items: Iterable) -> str:
    return json.dumps(
        [
            {
                "id": i.menu_item_id,
                "name": i.name,
                "price": str(i.price),
                "quantity": i.quantity,
            }
            for i in items
        ],
        sort_keys=True,
        separators=(",", ":"),
    )


def build_guard_key(user_id: str, cart_id: int, items) -> str:
    """order:{user}:{cart}:{liczba pozycji}:{sha256 zserializowanego koszyka}"""
    items = list(items)
    digest = hashlib.sha256(serialize_cart(items).encode("utf-8")).hexdigest()
    return f"order:{user_id}:{cart_id}:{len(items)}:{digest}"


class OrderGuard:
    """
    Straznik podwojnego zlozenia zamowienia.
    -processing: SET NX przed zapisem, drugi request dostaje False
    -completed: po udanym zapisie
    -release: po bledzie zapisu, zeby mozna bylo ponowic
    Autorytetem jest i tak unique na orders.idempotency_key.
    """

    def __init__(self, client: redis.Redis | None = None, url: str | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def state(self, key: str) -> str | None:
        return self.redis.get(key)

    def is_completed(self, key: str) -> bool:
        return self.state(key) == COMPLETED

    @redis_retry()
    def mark_processing(self, key: str, ttl: int) -> bool:
        logger.info(f"Guard {key} -> {PROCESSING}")
        return bool(self.redis.set(name=key, value=PROCESSING, nx=True, ex=ttl))

    @redis_retry()
    def mark_completed(self, key: str, ttl: int) -> None:
        logger.info(f"Guard {key} -> {COMPLETED}")
        self.redis.set(name=key, value=COMPLETED, ex=ttl)

    @redis_retry()
    def release(self, key: str) -> None:
        logger.info(f"Guard {key} released")
        self.redis.delete(key)
