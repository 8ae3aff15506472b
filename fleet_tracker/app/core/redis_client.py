"""
Redis connection backing token revocation.

Only ``token_revocation`` reads and writes through this client. Short socket
timeouts keep an unreachable Redis from stalling authenticated requests,
since revocation checks fail open.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError
from fleet_tracker.app.core.config import settings

logger = logging.getLogger("fleet_tracker")

redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
    socket_timeout=settings.redis_socket_timeout,
    socket_connect_timeout=settings.redis_socket_timeout,
)


async def ping_redis() -> bool:
    """Return True when the revocation store answers PING."""
    try:
        return await redis_client.ping()
    except RedisError as e:
        logger.warning("Redis ping failed: %s", e)
        return False
