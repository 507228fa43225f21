"""Redis async client for member session storage.

Built once in the application lifespan and stored on ``app.state``.
"""

import redis.asyncio as redis
from starlette.requests import HTTPConnection


def create_redis(redis_url: str) -> redis.Redis:
    return redis.from_url(redis_url, decode_responses=True)


async def get_redis(conn: HTTPConnection) -> redis.Redis:
    """FastAPI dependency for the Redis client."""
    return conn.app.state.redis
