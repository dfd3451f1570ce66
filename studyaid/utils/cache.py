"""
Redis query cache for remote study API reads
"""
import redis
import json
import logging
import hashlib
from typing import Optional, Any, Callable, Sequence
from studyaid.config import settings

logger = logging.getLogger(__name__)


class QueryCache:
    """
    Redis-based query cache keyed by (scope, query key)

    A query key is an ordered tuple such as ("lecture", lecture_id).
    Invalidating a query key drops it and every key it prefixes, so
    invalidating ("admin",) clears ("admin", "users") as well.
    """

    def __init__(self):
        try:
            self.redis_client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5
            )
            # Test connection
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {str(e)}. Caching disabled.")
            self.redis_client = None

    def generate_scope(self, session_id: str) -> str:
        """
        Derive an opaque cache scope from a session id

        Same session → same scope, so entries never leak between users.
        """
        return hashlib.sha256(session_id.encode()).hexdigest()[:16]

    def generate_cache_key(self, scope: str, query_key: Sequence[str]) -> str:
        """
        Generate deterministic cache key for a query

        Args:
            scope: Per-session scope from generate_scope
            query_key: Ordered key parts, e.g. ("quiz", quiz_id)

        Returns:
            Cache key string
        """
        return ":".join(["query", scope, *[str(part) for part in query_key]])

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        if not self.redis_client:
            return None

        try:
            value = self.redis_client.get(key)
            if value:
                logger.debug(f"Cache hit: {key}")
                return json.loads(value)
            logger.debug(f"Cache miss: {key}")
            return None
        except Exception as e:
            logger.error(f"Cache get error: {str(e)}")
            return None

    def set(
        self,
        key: str,
        value: Any,
        ttl: int = None
    ) -> bool:
        """
        Set value in cache

        Args:
            key: Cache key
            value: Value to cache (must be JSON serializable)
            ttl: Time to live in seconds (default from settings)

        Returns:
            Success status
        """
        if not self.redis_client:
            return False

        try:
            ttl = ttl or settings.QUERY_CACHE_TTL
            serialized = json.dumps(value)
            self.redis_client.setex(key, ttl, serialized)
            logger.debug(f"Cache set: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error: {str(e)}")
            return False

    def fetch(
        self,
        scope: str,
        query_key: Sequence[str],
        loader: Callable[[], Any]
    ) -> Any:
        """
        Return the cached result for a query, loading and storing it on a miss

        Errors from the loader propagate and nothing is cached.
        """
        key = self.generate_cache_key(scope, query_key)
        cached = self.get(key)
        if cached is not None:
            return cached

        value = loader()
        self.set(key, value)
        return value

    def delete(self, key: str) -> bool:
        """Delete key from cache"""
        if not self.redis_client:
            return False

        try:
            self.redis_client.delete(key)
            logger.debug(f"Cache delete: {key}")
            return True
        except Exception as e:
            logger.error(f"Cache delete error: {str(e)}")
            return False

    def invalidate(self, scope: str, query_key: Sequence[str]) -> bool:
        """Drop a query key and every key nested under it"""
        if not self.redis_client:
            return False

        key = self.generate_cache_key(scope, query_key)
        try:
            keys = self.redis_client.keys(f"{key}:*")
            self.redis_client.delete(key, *keys)
            logger.info(f"Invalidated query {key} ({len(keys) + 1} entries)")
            return True
        except Exception as e:
            logger.error(f"Cache invalidate error: {str(e)}")
            return False

    def clear_scope(self, scope: str) -> bool:
        """Clear all cached queries for a session scope"""
        if not self.redis_client:
            return False

        try:
            pattern = f"query:{scope}:*"
            keys = self.redis_client.keys(pattern)
            if keys:
                self.redis_client.delete(*keys)
                logger.info(f"Cleared {len(keys)} cache entries for scope {scope}")
            return True
        except Exception as e:
            logger.error(f"Cache clear error: {str(e)}")
            return False


# Global instance
query_cache = QueryCache()
