"""Admin gate routes — login page, login/logout endpoints."""

from __future__ import annotations

import pathlib

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from src.admin.auth import (
    AdminState,
    clear_admin_cookie,
    set_admin_cookie,
    verify_credentials,
)
from src.admin.dependencies import get_admin_state
from src.config import Settings, get_settings
from src.schemas.lead import AdminLoginIn

logger = structlog.get_logger()

router = APIRouter(tags=["admin"])

TEMPLATES_DIR = pathlib.Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    admin: AdminState = Depends(get_admin_state),
):
    """Show the admin login form."""
    if admin is AdminState.AUTHENTICATED:
        return RedirectResponse(url="/dashboard")
    return templates.TemplateResponse(request, "login.html", {})


@router.post("/api/login")
async def login(
    data: AdminLoginIn,
    settings: Settings = Depends(get_settings),
):
    """Check the credential pair and set the admin cookie flag on a match."""
    if not verify_credentials(data.username, data.password, settings):
        logger.warning("admin_login_failed")
        return JSONResponse(
            {"success": False, "message": "Invalid credentials"},
            status_code=401,
        )

    response = JSONResponse({"success": True})
    set_admin_cookie(response, settings)
    logger.info("admin_login_success")
    return response


@router.post("/api/logout")
async def logout():
    """Clear the admin cookie flag and send the browser to the login page."""
    response = RedirectResponse(url="/login", status_code=303)
    clear_admin_cookie(response)
    logger.info("admin_logout")
    return response
