"""Public pages — home search, contact, and lead capture forms."""

import pathlib
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from src.admin.dependencies import get_vendor_store
from src.config import Settings, get_settings
from src.core.exceptions import AppException
from src.database import get_db
from src.members.dependencies import get_current_member
from src.repositories.lead import LeadRepository
from src.repositories.vendor import VendorStore
from src.schemas.lead import ContactSubmissionIn, SearchRequestIn
from src.schemas.search import SearchPage
from src.search.controller import FETCH_ERROR_MESSAGE
from src.search.service import public_search, public_view

logger = structlog.get_logger()

router = APIRouter()

TEMPLATES_DIR = pathlib.Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse)
async def landing_page(
    request: Request,
    member: Optional[dict] = Depends(get_current_member),
):
    """Serve the home page with the vendor search box."""
    return templates.TemplateResponse(request, "index.html", {"member": member})


@router.get("/search", response_class=HTMLResponse)
async def search_results(
    request: Request,
    q: str = Query(""),
    page: int = Query(1, ge=1),
    member: Optional[dict] = Depends(get_current_member),
    store: VendorStore = Depends(get_vendor_store),
    settings: Settings = Depends(get_settings),
):
    """HTMX partial with one page of public search results."""
    error = None
    try:
        result = await public_search(store, settings.page_size).fetch(q, page)
    except AppException as e:
        logger.warning("public_search_failed", query=q, page=page, error=e.message)
        result = SearchPage(query=q.strip())
        error = FETCH_ERROR_MESSAGE

    return templates.TemplateResponse(
        request,
        "partials/results.html",
        {"view": public_view(result, member is not None), "error": error},
    )


@router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request):
    return templates.TemplateResponse(request, "contact.html", {})


@router.post("/api/search-requests")
async def create_search_request(
    data: SearchRequestIn,
    db: AsyncSession = Depends(get_db),
):
    """Save a "chemical not found" request."""
    row = await LeadRepository(db).create_search_request(data)
    return {"status": "ok", "id": str(row.id)}


@router.post("/api/contact")
async def create_contact_submission(
    data: ContactSubmissionIn,
    db: AsyncSession = Depends(get_db),
):
    """Save a contact form submission."""
    row = await LeadRepository(db).create_contact_submission(data)
    return {"status": "ok", "id": str(row.id)}
