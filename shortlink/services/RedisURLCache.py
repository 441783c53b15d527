import json
import logging
from typing import Optional

import redis
import redis.exceptions

from shortlink.db.stores import Mapping

logger = logging.getLogger(__name__)
CACHE_TTL = 86400


class RedisURLCache:
    """Cache of mappings keyed by short code.

    Entries keep the owner so the ownership gate can be applied to cache
    hits. Only the mapping stores write entries, from inside their critical
    sections; readers never fill it. Redis being unreachable is never an
    error: the cache is skipped and the store answers.
    """

    def __init__(self, client: redis.Redis, ttl: int = CACHE_TTL):
        self.client = client
        self.ttl = ttl

    @staticmethod
    def _key(code: str) -> str:
        return f"url:{code}"

    def get(self, code: str) -> Optional[Mapping]:
        try:
            cached = self.client.get(self._key(code))
        except redis.exceptions.ConnectionError:
            logger.warning(f"Redis connection failed for {code}")
            return None

        if not cached:
            return None

        try:
            entry = json.loads(cached)
            mapping = Mapping(code=code, target_url=entry["value"], owner_username=entry["owner"])
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Discarding unreadable cache entry for {code}")
            self.evict(code)
            return None

        logger.info(f"Cache HIT for {code}")
        return mapping

    def put(self, mapping: Mapping):
        entry = json.dumps({"value": mapping.target_url, "owner": mapping.owner_username})
        try:
            self.client.setex(self._key(mapping.code), self.ttl, entry)
            logger.debug(f"Cached {mapping.code} -> {mapping.target_url[:50]}")
        except redis.exceptions.ConnectionError:
            logger.warning(f"Failed to cache {mapping.code}, Redis unavailable")

    def evict(self, code: str):
        try:
            self.client.delete(self._key(code))
        except redis.exceptions.ConnectionError:
            logger.warning(f"Failed to evict {code}, Redis unavailable")
