from typing import Optional
from fastapi import HTTPException, status
from datetime import datetime, timezone
import time

from redis.exceptions import RedisError

from services.cache import CacheService
from core.config import settings
from core.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Rate limiter using Redis sliding window algorithm.

    How it works:
    1. Key format: "rate_limit:user_id:endpoint"
    2. Store timestamps of requests in a Redis sorted set
    3. Remove old timestamps (> window)
    4. Count remaining timestamps
    5. Allow if count < limit, else reject
    """

    @staticmethod
    def _key(user_id: str, endpoint: str) -> str:
        return f"rate_limit:{user_id}:{endpoint}"

    @staticmethod
    async def check_rate_limit(
            user_id: str,
            endpoint: str = "api",
            limit: Optional[int] = None,
            window_seconds: int = 60
    ) -> bool:

        # Use config default if not specified
        if limit is None:
            limit = settings.rate_limit_per_minute

        redis = await CacheService.get_redis()
        if not redis:
            # If Redis is unavailable, allow request (fail open)
            return True

        key = RateLimiter._key(user_id, endpoint)
        current_time = time.time()
        window_start = current_time - window_seconds

        try:
            # Remove old entries (outside time window)
            await redis.zremrangebyscore(key, 0, window_start)

            # Count requests in current window
            request_count = await redis.zcard(key)

            if request_count >= limit:
                # Get oldest timestamp to calculate retry-after
                oldest = await redis.zrange(key, 0, 0, withscores=True)
                if oldest:
                    retry_after = max(int(oldest[0][1] + window_seconds - current_time), 1)
                else:
                    retry_after = window_seconds

                logger.warning(
                    f"Rate limit exceeded for user {user_id} on {endpoint}: "
                    f"{request_count}/{limit} requests"
                )

                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit exceeded. Try again in {retry_after} seconds.",
                    headers={"Retry-After": str(retry_after)}
                )

            await redis.zadd(key, {str(current_time): current_time})

            # Set expiry on key (cleanup)
            await redis.expire(key, window_seconds)

            remaining = limit - request_count - 1
            logger.debug(f"Rate limit check passed for user {user_id}: {remaining} requests remaining")

            return True

        except RedisError as e:
            # Log error but allow request (fail open)
            logger.error(f"Rate limit check failed: {e}")
            return True

    @staticmethod
    async def get_rate_limit_info(
            user_id: str,
            endpoint: str = "api",
            limit: Optional[int] = None,
            window_seconds: int = 60
    ) -> dict:
        """
        Get current rate limit status for a user.

        Returns:
            {
                "limit": 100,
                "remaining": 85,
                "used": 15,
                "reset_at": "2026-01-05T12:34:56+00:00"
            }
        """
        if limit is None:
            limit = settings.rate_limit_per_minute

        unlimited = {"limit": limit, "remaining": limit, "used": 0, "reset_at": None}

        redis = await CacheService.get_redis()
        if not redis:
            return unlimited

        key = RateLimiter._key(user_id, endpoint)
        current_time = time.time()
        window_start = current_time - window_seconds

        try:
            await redis.zremrangebyscore(key, 0, window_start)

            request_count = await redis.zcard(key)
            remaining = max(0, limit - request_count)

            oldest = await redis.zrange(key, 0, 0, withscores=True)
            if oldest:
                reset_timestamp = oldest[0][1] + window_seconds
                reset_at = datetime.fromtimestamp(reset_timestamp, tz=timezone.utc).isoformat()
            else:
                reset_at = None

            return {
                "limit": limit,
                "remaining": remaining,
                "used": request_count,
                "reset_at": reset_at,
            }

        except RedisError as e:
            logger.error(f"Failed to get rate limit info: {e}")
            return unlimited
