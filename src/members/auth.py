"""Member (end-user) authentication + Redis session management."""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
from typing import Optional

import structlog
from redis.asyncio import Redis

logger = structlog.get_logger()

SESSION_PREFIX = "member_session:"
PBKDF2_ITERATIONS = 260_000


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Hash a password as ``pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>``."""
    salt = salt or secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False

    computed = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        bytes.fromhex(salt_hex),
        int(iterations),
    )
    return hmac.compare_digest(computed.hex(), digest_hex)


async def create_session(
    redis: Redis,
    member_id: str,
    email: str,
    ttl_seconds: int,
) -> str:
    """Create a member session in Redis.

    Args:
        redis: Redis client
        member_id: UUID of the member
        email: Member email for display
        ttl_seconds: Session lifetime

    Returns:
        Session token (random string)
    """
    token = secrets.token_urlsafe(32)
    session_data = json.dumps({"member_id": member_id, "email": email})

    await redis.setex(f"{SESSION_PREFIX}{token}", ttl_seconds, session_data)

    logger.info("member_session_created", member_id=member_id)
    return token


async def get_session(redis: Redis, token: Optional[str]) -> Optional[dict]:
    """Session dict with member_id and email, or None."""
    if not token:
        return None

    data = await redis.get(f"{SESSION_PREFIX}{token}")
    if not data:
        return None

    try:
        return json.loads(data)
    except (json.JSONDecodeError, TypeError):
        return None


async def delete_session(redis: Redis, token: str) -> None:
    await redis.delete(f"{SESSION_PREFIX}{token}")
