# pharmacart/services/rate_cache.py
import json

import redis

from pharmacart.utils.retry import redis_retry
from pharmacart.utils.settings import REDIS_URL, EXCHANGE_RATE_CACHE_TTL
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


class RateCache:
    """
    -read-through cache for exchange rates
    -one key per currency, expires after EXCHANGE_RATE_CACHE_TTL
    -every write to a rate row drops its key
    """

    def __init__(self, url: str | None = None, ttl: int = EXCHANGE_RATE_CACHE_TTL):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(currency: str) -> str:
        return f"fx:{currency}"

    @redis_retry()
    def get(self, currency: str) -> dict | None:
        raw = self.redis.get(self._key(currency))
        if raw is None:
            return None
        return json.loads(raw)

    @redis_retry()
    def set(self, currency: str, rate: str, symbol: str | None) -> None:
        #SET fx:USD '{"rate": "0.012", "symbol": "$"}' EX 900
        self.redis.set(
            name=self._key(currency),
            value=json.dumps({"rate": rate, "symbol": symbol}),
            ex=self.ttl,
        )

    @redis_retry()
    def invalidate(self, currency: str) -> None:
        logger.info(f"Invalidate cached rate for {currency}")
        self.redis.delete(self._key(currency))
