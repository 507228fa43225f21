"""Vendor search — one filtered, counted, paginated fetch per call."""

from __future__ import annotations

import structlog

from src.repositories.vendor import VendorStore
from src.schemas.search import PublicSearchPage, SearchPage
from src.search.pagination import PAGE_SIZE, PageWindow, clamp_page, total_pages_for

logger = structlog.get_logger()


class VendorSearchService:
    """Stateless search over a ``VendorStore``.

    The public home page and the admin dashboard differ only in two flags:
    whether an empty query lists everything, and whether rows are ordered
    by sequence number.
    """

    def __init__(
        self,
        store: VendorStore,
        page_size: int = PAGE_SIZE,
        match_all_on_empty: bool = False,
        order_by_sequence: bool = False,
    ):
        self.store = store
        self.page_size = page_size
        self.match_all_on_empty = match_all_on_empty
        self.order_by_sequence = order_by_sequence

    def skips_fetch(self, query: str) -> bool:
        return not query.strip() and not self.match_all_on_empty

    async def fetch(self, query: str, page: int = 1) -> SearchPage:
        """Fetch one page of matches for ``query``.

        A page past the end is clamped to the last page and fetched again,
        so the returned page always lies in [1, total_pages].
        """
        query = query.strip()
        if self.skips_fetch(query):
            return SearchPage(query=query)

        window = PageWindow(max(page, 1), self.page_size)
        results, total = await self.store.search(query, window, self.order_by_sequence)
        total_pages = total_pages_for(total, self.page_size)

        clamped = clamp_page(window.page, total_pages)
        if clamped != window.page:
            logger.debug("search_page_clamped", requested=window.page, clamped=clamped)
            window = PageWindow(clamped, self.page_size)
            results, total = await self.store.search(query, window, self.order_by_sequence)
            total_pages = total_pages_for(total, self.page_size)

        return SearchPage(
            query=query,
            page=window.page,
            total=total,
            total_pages=total_pages,
            results=results,
        )


def public_search(store: VendorStore, page_size: int = PAGE_SIZE) -> VendorSearchService:
    return VendorSearchService(store, page_size=page_size)


def admin_listing(store: VendorStore, page_size: int = PAGE_SIZE) -> VendorSearchService:
    return VendorSearchService(
        store,
        page_size=page_size,
        match_all_on_empty=True,
        order_by_sequence=True,
    )


def public_view(page: SearchPage, authenticated: bool) -> PublicSearchPage:
    """Apply the sign-in gate to a fetched page.

    The whole page is always fetched; anonymous visitors are shown only
    its first row.
    """
    visible = page.results if authenticated else page.results[:1]
    return PublicSearchPage(
        query=page.query,
        page=page.page,
        total_pages=page.total_pages,
        authenticated=authenticated,
        results=visible,
        hidden_count=len(page.results) - len(visible),
    )
