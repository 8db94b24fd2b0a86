"""
Redis cache utility for offline reading log snapshots
"""
import redis
import json
import logging
from typing import Optional, Any, List, Dict
from app.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Redis-backed snapshot store

    Holds raw reading logs only, never derived statistics, so every
    computation still runs over a full log history.
    """

    def __init__(self, url: str = None):
        try:
            self.redis_client = redis.from_url(
                url or settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5
            )
            # Test connection
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {str(e)}. Offline snapshots disabled.")
            self.redis_client = None

    @staticmethod
    def log_snapshot_key(user_id: int) -> str:
        """Deterministic snapshot key for a user's log history"""
        return f"reading_logs:{user_id}"

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
            ttl = ttl or settings.LOG_SNAPSHOT_TTL
            serialized = json.dumps(value)
            self.redis_client.setex(key, ttl, serialized)
            logger.debug(f"Cache set: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error: {str(e)}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache"""
        if not self.redis_client:
            return False

        try:
            self.redis_client.delete(key)
            logger.info(f"Cache delete: {key}")
            return True
        except Exception as e:
            logger.error(f"Cache delete error: {str(e)}")
            return False

    def get_log_snapshot(self, user_id: int) -> Optional[List[Dict[str, Any]]]:
        return self.get(self.log_snapshot_key(user_id))

    def set_log_snapshot(self, user_id: int, logs: List[Dict[str, Any]]) -> bool:
        return self.set(self.log_snapshot_key(user_id), logs)

    def clear_log_snapshot(self, user_id: int) -> bool:
        return self.delete(self.log_snapshot_key(user_id))


# Global instance
cache_service = CacheService()
