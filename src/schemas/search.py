"""Search result schemas."""

from __future__ import annotations

from pydantic import BaseModel

from src.schemas.vendor import VendorRecord


class SearchPage(BaseModel):
    """One fetched page of vendor matches."""

    query: str = ""
    page: int = 1
    total: int = 0
    total_pages: int = 0
    results: list[VendorRecord] = []


class PublicSearchPage(BaseModel):
    """What a public visitor is shown for a page of matches.

    Anonymous visitors see only the first row; ``hidden_count`` drives the
    "N more results, sign in to view" prompt.
    """

    query: str = ""
    page: int = 1
    total_pages: int = 0
    authenticated: bool = False
    results: list[VendorRecord] = []
    hidden_count: int = 0
