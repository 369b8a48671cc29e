# tiffin/services/checkout_stash.py
import json

import redis

from tiffin.utils.retry import redis_retry
from tiffin.utils.settings import REDIS_URL


class CheckoutStash:
    """Dane formularza checkoutu trzymane przez chwile miedzy dwoma krokami (TTL)."""

    def __init__(self, client: redis.Redis | None = None, url: str | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id: str) -> str:
        return f"checkout:{user_id}"

    @redis_retry()
    def save(self, user_id: str, form: dict, ttl: int) -> None:
        self.redis.set(self._key(user_id), json.dumps(form), ex=ttl)

    @redis_retry()
    def load(self, user_id: str) -> dict | None:
        raw = self.redis.get(self._key(user_id))
        return json.loads(raw) if raw else None

    @redis_retry()
    def delete(self, user_id: str) -> None:
        self.redis.delete(self._key(user_id))
