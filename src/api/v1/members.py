"""Member auth API — register, login, logout."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings, get_settings
from src.core.exceptions import UnauthorizedError, ValidationError
from src.database import get_db
from src.members.auth import create_session, delete_session, hash_password, verify_password
from src.members.dependencies import MEMBER_COOKIE
from src.models.member import Member
from src.redis_client import get_redis
from src.schemas.lead import MemberLoginIn, MemberRegisterIn

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["members"])


@router.post("/register")
async def register(
    data: MemberRegisterIn,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Create a member account."""
    data.validate_required()
    email = data.email.strip().lower()

    existing = await db.execute(select(Member.id).where(Member.email == email))
    if existing.scalar_one_or_none() is not None:
        raise ValidationError("An account with this email already exists")

    member = Member(
        company_name=data.company.strip(),
        full_name=data.name.strip(),
        email=email,
        mobile=data.mobile,
        password_hash=hash_password(data.password),
    )
    db.add(member)
    await db.flush()

    logger.info("member_registered", member_id=str(member.id))
    return {"success": True, "message": "Registration successful! You can now log in."}


@router.post("/login")
async def login(
    data: MemberLoginIn,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
    settings: Settings = Depends(get_settings),
):
    """Check email/password and start a member session."""
    data.validate_required()
    email = data.email.strip().lower()

    result = await db.execute(select(Member).where(Member.email == email))
    member = result.scalar_one_or_none()
    if member is None or not verify_password(data.password, member.password_hash):
        logger.warning("member_login_failed")
        raise UnauthorizedError("Invalid login credentials")

    token = await create_session(
        redis,
        member_id=str(member.id),
        email=member.email,
        ttl_seconds=settings.member_session_ttl_seconds,
    )

    response = JSONResponse({"success": True})
    response.set_cookie(
        key=MEMBER_COOKIE,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.member_session_ttl_seconds,
    )
    return response


@router.post("/logout")
async def logout(
    member_token: Optional[str] = Cookie(None),
    redis: Redis = Depends(get_redis),
):
    """End the member session, if any."""
    if member_token:
        await delete_session(redis, member_token)

    response = JSONResponse({"success": True})
    response.delete_cookie(MEMBER_COOKIE)
    return response
