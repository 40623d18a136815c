"""
Caching for store detail payloads.

Store detail (with its inventory) is read on every dashboard refresh, so the
serialized payload is cached by store id and dropped whenever the store or
one of its items changes.
"""
from django.core.cache import cache
import logging

logger = logging.getLogger(__name__)

STORE_KEY_PREFIX = 'store:'

# Cache TTL (Time To Live) in seconds
STORE_CACHE_TTL = 900  # 15 minutes


def get_store_cache_key(store_id: int) -> str:
    """Get cache key for store by ID"""
    return f"{STORE_KEY_PREFIX}{store_id}"


def cache_store_data(store_id: int, data, ttl: int = None):
    """Cache a serialized store payload"""
    if store_id is None or data is None:
        return
    ttl = ttl or STORE_CACHE_TTL
    cache.set(get_store_cache_key(store_id), data, ttl)
    logger.debug(f"Cached store data (ID: {store_id})")


def get_cached_store(store_id: int):
    """Get cached store payload by ID"""
    cached_data = cache.get(get_store_cache_key(store_id))
    if cached_data:
        logger.debug(f"Cache hit for store: {store_id}")
    return cached_data


def invalidate_store_cache(store_id: int):
    """Drop the cached payload for a store"""
    if store_id is None:
        return
    cache.delete(get_store_cache_key(store_id))
    logger.debug(f"Invalidated cache for store ID: {store_id}")
