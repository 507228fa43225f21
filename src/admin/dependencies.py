"""FastAPI dependencies for the admin gate and vendor store."""

from __future__ import annotations

from typing import Optional

from fastapi import Cookie, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.admin.auth import AdminState, session_state
from src.database import get_db
from src.repositories.vendor import VendorRepository, VendorStore


async def get_admin_state(
    admin_auth: Optional[str] = Cookie(None, alias="admin-auth"),
) -> AdminState:
    """Admin gate state from the cookie flag. Views redirect when anonymous."""
    return session_state(admin_auth)


async def get_vendor_store(db: AsyncSession = Depends(get_db)) -> VendorStore:
    return VendorRepository(db)
