# storefront/services/facet_cache.py
import hashlib
import json
from typing import Callable, Optional

import redis
from redis.exceptions import RedisError

from storefront.domain.schemas import ProductScope
from storefront.utils.retry import redis_retry
from storefront.utils.settings import FACET_CACHE_ENABLED, FACET_CACHE_TTL_SECONDS, REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class FacetCache:
    """
    -cache "available filters" per scope (kategoria / wyszukiwanie)
    -wartosc JSON z TTL, wygasa sama
    -redis niedostepny -> liczymy facety bez cache
    """

    def __init__(self, client: Optional[redis.Redis] = None, ttl: int = FACET_CACHE_TTL_SECONDS):
        self.redis = client
        self.ttl = ttl

    @classmethod
    def from_settings(cls) -> "FacetCache":
        if not FACET_CACHE_ENABLED or not REDIS_URL:
            return cls(client=None)
        return cls(client=redis.Redis.from_url(REDIS_URL, decode_responses=True))

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    @staticmethod
    def key_for(scope: ProductScope) -> str:
        digest = hashlib.sha1(scope.model_dump_json().encode()).hexdigest()
        return f"facets:{digest}"

    @redis_retry()
    def _get(self, key: str) -> Optional[str]:
        return self.redis.get(key)

    @redis_retry()
    def _set(self, key: str, value: str) -> None:
        self.redis.set(name=key, value=value, ex=self.ttl)

    def get_or_compute(self, scope: ProductScope, compute: Callable[[], dict]) -> dict:
        if not self.enabled:
            return compute()

        key = self.key_for(scope)
        try:
            cached = self._get(key)
        except RedisError as e:
            logger.warning(f"Facet cache read failed for {key}: {e}")
            return compute()

        if cached is not None:
            return json.loads(cached)

        facets = compute()
        try:
            self._set(key, json.dumps(facets))
        except RedisError as e:
            logger.warning(f"Facet cache write failed for {key}: {e}")
        return facets
