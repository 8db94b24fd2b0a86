"""
Rate limiting middleware support for API endpoints
"""
import time
from collections import defaultdict
from fastapi import Request, HTTPException
from typing import Dict, List, Tuple
import logging

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory sliding-window rate limiter

    Each window is (name, length_seconds, limit). A request is rejected
    when any window already holds `limit` requests for the client.
    Clients idle for longer than a window are swept out of its tracker.
    """

    SWEEP_INTERVAL = 60

    def __init__(self, requests_per_minute: int = 60, requests_per_hour: int = 1000):
        self.windows: List[Tuple[str, int, int]] = [
            ("minute", 60, requests_per_minute),
            ("hour", 3600, requests_per_hour),
        ]

        # Storage: {client_id: [timestamp, ...]} per window name
        self.trackers: Dict[str, Dict[str, List[float]]] = {
            name: defaultdict(list) for name, _, _ in self.windows
        }
        self.last_sweep = time.time()

    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        user_id = request.query_params.get("user_id")
        if user_id:
            return f"user:{user_id}"

        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"

    def _prune(self, tracker: Dict[str, List[float]], client_id: str, cutoff: float) -> List[float]:
        """Drop timestamps older than the window for one client"""
        recent = [ts for ts in tracker.get(client_id, []) if ts > cutoff]
        if recent:
            tracker[client_id] = recent
        else:
            tracker.pop(client_id, None)
        return recent

    def sweep(self, current_time: float) -> int:
        """
        Prune every tracked client, dropping those with no recent requests

        Returns:
            Number of client entries removed
        """
        removed = 0
        for name, length, _ in self.windows:
            tracker = self.trackers[name]
            for client_id in list(tracker):
                if not self._prune(tracker, client_id, current_time - length):
                    removed += 1

        self.last_sweep = current_time
        if removed:
            logger.debug(f"Rate limiter swept {removed} idle client entries")
        return removed

    async def check_rate_limit(self, request: Request) -> None:
        """
        Check if request exceeds rate limits

        Raises:
            HTTPException: 429 if rate limit exceeded
        """
        client_id = self._get_client_id(request)
        current_time = time.time()

        if current_time - self.last_sweep >= self.SWEEP_INTERVAL:
            self.sweep(current_time)

        for name, length, limit in self.windows:
            recent = self._prune(self.trackers[name], client_id, current_time - length)
            if len(recent) >= limit:
                logger.warning(f"Rate limit exceeded ({name}): {client_id}")
                raise HTTPException(
                    status_code=429,
                    detail={
                        "error": "rate_limit_exceeded",
                        "message": f"Too many requests. Limit: {limit} requests per {name}",
                        "retry_after": length
                    }
                )

        for name, _, _ in self.windows:
            self.trackers[name][client_id].append(current_time)

        logger.debug(f"Rate limit check passed: {client_id}")

    def reset(self) -> None:
        for tracker in self.trackers.values():
            tracker.clear()
        self.last_sweep = time.time()


# Global instance
from app.config import settings
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR
)
