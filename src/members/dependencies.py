"""FastAPI dependencies for member sessions."""

from __future__ import annotations

from typing import Optional

from fastapi import Cookie, Depends
from redis.asyncio import Redis

from src.members.auth import get_session
from src.redis_client import get_redis

MEMBER_COOKIE = "member_token"


async def get_current_member(
    member_token: Optional[str] = Cookie(None),
    redis: Redis = Depends(get_redis),
) -> Optional[dict]:
    """Member session for the request, or None for anonymous visitors."""
    return await get_session(redis, member_token)
