from typing import Optional
from datetime import datetime, timezone
import hashlib

from redis.exceptions import RedisError

from services.cache import CacheService
from core.config import settings
from core.logger import get_logger

logger = get_logger(__name__)


class TokenBlacklistService:

    @staticmethod
    def _hash_token(token: str) -> str:

        return hashlib.sha256(token.encode()).hexdigest()

    @staticmethod
    def _key(token: str) -> str:
        return f"blacklist:token:{TokenBlacklistService._hash_token(token)}"

    @staticmethod
    async def blacklist_token(token: str, expiry_seconds: Optional[int] = None) -> bool:

        redis = await CacheService.get_redis()
        if not redis:

            logger.warning("Redis unavailable, cannot blacklist token")
            return False

        if expiry_seconds is None:
            expiry_seconds = settings.jwt_access_token_expires_minutes * 60

        if expiry_seconds <= 0:
            # already expired, nothing left to revoke
            return True

        try:
            await redis.setex(
                TokenBlacklistService._key(token),
                expiry_seconds,
                datetime.now(timezone.utc).isoformat()  # Store blacklist timestamp
            )

            logger.info(f"Token blacklisted (ttl={expiry_seconds}s)")
            return True

        except RedisError as e:
            logger.error(f"Failed to blacklist token: {e}")
            return False

    @staticmethod
    async def is_token_blacklisted(token: str) -> bool:

        redis = await CacheService.get_redis()
        if not redis:
            # If Redis is down, allow the token (fail open)
            return False

        try:
            exists = await redis.exists(TokenBlacklistService._key(token))

            if exists:
                logger.warning("Attempted use of blacklisted token")

            return bool(exists)

        except RedisError as e:
            logger.error(f"Failed to check token blacklist: {e}")
            return False  # Fail open
