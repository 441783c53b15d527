import logging
from typing import Optional

from shortlink.core.errors import NotFoundOrDenied
from shortlink.db.stores import Mapping, MappingStore, owned_by
from shortlink.services.RedisURLCache import RedisURLCache


logger = logging.getLogger(__name__)


class URLService:
    """Mapping operations for an authenticated user.

    Lookups try the cache first. The cache itself is kept up to date by the
    store, so this class only ever reads from it.
    """

    def __init__(self, store: MappingStore, cache: Optional[RedisURLCache] = None):
        self.store = store
        self.cache = cache

    def create_short_url(self, target_url: str, owner: str) -> Mapping:
        mapping = self.store.create(target_url, owner)
        logger.info(f"Shortened {target_url[:50]} to {mapping.code} for {owner}")
        return mapping

    def get_url(self, code: str, requester: str) -> Mapping:
        try:
            cached = self.cache.get(code) if self.cache else None
            if cached is not None:
                return owned_by(cached, requester)
            return self.store.read(code, requester)
        except NotFoundOrDenied:
            logger.info(f"Lookup of {code} by {requester}: not found or denied")
            raise

    def update_url(self, code: str, new_url: str, requester: str) -> Mapping:
        mapping = self.store.update(code, new_url, requester)
        logger.info(f"Updated {mapping.code} -> {new_url[:50]}")
        return mapping

    def delete_url(self, code: str, requester: str) -> None:
        self.store.delete(code, requester)
        logger.info(f"Deleted {code} for {requester}")
