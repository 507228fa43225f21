"""Public vendor search API."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query

from src.admin.dependencies import get_vendor_store
from src.config import Settings, get_settings
from src.members.dependencies import get_current_member
from src.repositories.vendor import VendorStore
from src.schemas.search import PublicSearchPage
from src.search.service import public_search, public_view

logger = structlog.get_logger()

router = APIRouter(prefix="/api/vendors", tags=["vendors"])


@router.get("/search", response_model=PublicSearchPage)
async def search_vendors(
    q: str = Query("", description="CAS number or chemical name fragment"),
    page: int = Query(1, ge=1),
    member: Optional[dict] = Depends(get_current_member),
    store: VendorStore = Depends(get_vendor_store),
    settings: Settings = Depends(get_settings),
) -> PublicSearchPage:
    """Search the directory by CAS number or chemical name.

    Anonymous callers get the first match of the page plus ``hidden_count``;
    signed-in members get the whole page. Store errors propagate to the
    JSON error handler.
    """
    result = await public_search(store, settings.page_size).fetch(q, page)
    return public_view(result, member is not None)
