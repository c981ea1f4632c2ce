"""
Caching utilities for expensive report queries
Uses the configured Django cache (Redis in production)
"""
from django.core.cache import cache
from django.db import transaction
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
FINANCE_DASHBOARD_CACHE_TTL = 300  # 5 minutes
FINANCE_DASHBOARD_KEY_PREFIX = 'finance_dashboard'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=300, key_prefix="finance_dashboard")
        def get_dashboard_kpis(as_of):
            return data
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern.
    Uses Redis SCAN; other cache backends are cleared entirely.
    """
    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")
    except NotImplementedError:
        # Not a Redis backend (local memory cache in development/tests)
        cache.clear()
        logger.debug(f"Cleared non-Redis cache for pattern: {pattern}")
        return

    try:
        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def invalidate_finance_dashboard_cache():
    invalidate_cache_pattern(FINANCE_DASHBOARD_KEY_PREFIX)


def invalidate_finance_dashboard_cache_on_commit():
    """
    Invalidate once the current transaction commits, so a dashboard read
    racing the write cannot re-cache the old figures.
    Runs immediately when no transaction is open.
    """
    transaction.on_commit(invalidate_finance_dashboard_cache)
