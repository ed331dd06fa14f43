# /app/db/redis.py
from typing import AsyncIterator, Optional
from redis.asyncio import Redis
import asyncio
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def redis_url() -> str:
    if settings.REDIS_PASSWORD:
        return f"redis://:{settings.REDIS_PASSWORD}@{settings.REDIS_HOST}:{settings.REDIS_PORT}"
    return f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}"


async def get_redis() -> AsyncIterator[Optional[Redis]]:
    """
    Redis client as a FastAPI dependency. Yields None when Redis cannot be
    reached; rate limiting is then skipped for the request.
    """
    max_retries = 3
    retry_delay = 0.5  # seconds

    redis = None
    for attempt in range(max_retries):
        try:
            redis = Redis.from_url(redis_url(), decode_responses=True)
            await redis.ping()
            break
        except Exception as e:
            if redis:
                await redis.close()
                redis = None

            if attempt < max_retries - 1:
                logger.warning(
                    f"Redis connection attempt {attempt + 1} failed: {str(e)}. Retrying in {retry_delay}s...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2
            else:
                logger.error(f"Redis connection failed after {max_retries} attempts: {str(e)}")

    if not redis:
        logger.warning("Continuing without Redis, rate limiting is disabled for this request")
        yield None
        return

    try:
        yield redis
    finally:
        await redis.close()
