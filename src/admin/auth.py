"""Admin gate — fixed credential check and a presence-only cookie flag.

The cookie carries no claims and is not signed: holding
``admin-auth=authenticated`` is the whole of the admin's authorization.
"""

from __future__ import annotations

import hmac
from enum import Enum
from typing import Optional

import structlog
from starlette.responses import Response

from src.config import Settings

logger = structlog.get_logger()

ADMIN_COOKIE = "admin-auth"
AUTHENTICATED = "authenticated"


class AdminState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


def verify_credentials(username: str, password: str, settings: Settings) -> bool:
    """Compare against the configured credential pair.

    Both comparisons always run so the result does not reveal which field
    was wrong. An unconfigured pair never matches.
    """
    if not settings.admin_username or not settings.admin_password:
        logger.warning("admin_credentials_not_configured")
        return False

    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.admin_username.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))
    return user_ok and pass_ok


def session_state(cookie_value: Optional[str]) -> AdminState:
    if cookie_value == AUTHENTICATED:
        return AdminState.AUTHENTICATED
    return AdminState.ANONYMOUS


def is_authenticated(cookie_value: Optional[str]) -> bool:
    return session_state(cookie_value) is AdminState.AUTHENTICATED


def set_admin_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=ADMIN_COOKIE,
        value=AUTHENTICATED,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.admin_cookie_max_age,
        path="/",
    )


def clear_admin_cookie(response: Response) -> None:
    response.delete_cookie(ADMIN_COOKIE, path="/")
