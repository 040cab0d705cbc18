from typing import Optional
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from core.config import settings
from core.logger import get_logger

logger = get_logger(__name__)

class CacheService:
    #holds the shared redis connection used by the token blacklist and the rate limiter

    _redis_client: Optional[aioredis.Redis] = None

    @classmethod
    async def get_redis(cls) ->Optional[aioredis.Redis] :
        #this gets or creates a redis connection and returns None if redis url is not configured

        if not settings.redis_url:
            logger.debug("redis URL not configured, redis features disabled")
            return None
        if cls._redis_client is None:
            client = aioredis.from_url(settings.redis_url, encoding="utf-8", decode_responses = True, max_connections=10)
            try:
                await client.ping()
            except RedisError as e:
                logger.error(f"failed to connect to redis: {e}")
                await client.aclose()
                return None
            cls._redis_client = client
            logger.info("redis connection established")
        return cls._redis_client

    @classmethod
    async def close(cls):
        #close redis connection on shutdown
        if cls._redis_client:
            await cls._redis_client.aclose()
            cls._redis_client = None
            logger.info("redis connection closed")
