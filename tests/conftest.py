"""Test fixtures and configuration."""

import asyncio
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from src.core.exceptions import DuplicateSequenceError, NotFoundError, StoreUnavailableError
from src.schemas.vendor import VendorRecord
from src.search.pagination import PageWindow


def make_vendor(sr_no: str, chemical_name: str = "Acetone", cas_no: str = "67-64-1", **overrides) -> VendorRecord:
    fields = {
        "sr_no": sr_no,
        "chemical_name": chemical_name,
        "category": "Solvent",
        "cas_no": cas_no,
        "supplier_name": f"Supplier {sr_no}",
        "contact_info": f"sales{sr_no}@example.com",
        "phone_number": "+91 22 5550 0000",
        "business_status": "Active",
        "country": "India",
    }
    fields.update(overrides)
    return VendorRecord(**fields)


class FakeVendorStore:
    """In-memory ``VendorStore`` with call recording and failure injection."""

    def __init__(self, vendors: Optional[list[VendorRecord]] = None):
        self.rows: dict[str, VendorRecord] = {v.sr_no: v for v in vendors or []}
        self.search_calls: list[tuple[str, int]] = []
        self.delays: dict[str, float] = {}
        self.fail_on: set[str] = set()

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreUnavailableError(f"Could not {operation} vendors")

    async def search(self, query, window: PageWindow, order_by_sequence=False):
        self.search_calls.append((query, window.page))
        await asyncio.sleep(self.delays.get(query, 0))
        self._maybe_fail("search")

        needle = query.lower()
        matches = [
            v for v in self.rows.values()
            if needle in v.cas_no.lower() or needle in v.chemical_name.lower()
        ]
        if order_by_sequence:
            matches.sort(key=lambda v: (not v.sr_no.isdigit(), int(v.sr_no) if v.sr_no.isdigit() else 0, v.sr_no))
        return matches[window.start:window.end + 1], len(matches)

    async def list_sequence_numbers(self):
        self._maybe_fail("read")
        return list(self.rows)

    async def get(self, sr_no):
        self._maybe_fail("read")
        if sr_no not in self.rows:
            raise NotFoundError(f"Vendor {sr_no} not found")
        return self.rows[sr_no].model_copy()

    async def insert(self, record):
        self._maybe_fail("insert")
        if record.sr_no in self.rows:
            raise DuplicateSequenceError(f"Sr. No {record.sr_no} is already taken. Please try again.")
        self.rows[record.sr_no] = record.model_copy()

    async def update(self, record):
        self._maybe_fail("update")
        if record.sr_no not in self.rows:
            raise NotFoundError(f"Vendor {record.sr_no} not found")
        self.rows[record.sr_no] = record.model_copy()

    async def delete(self, sr_no):
        self._maybe_fail("delete")
        if sr_no not in self.rows:
            raise NotFoundError(f"Vendor {sr_no} not found")
        del self.rows[sr_no]


@pytest.fixture
def vendors():
    """25 vendors: 12 acetone rows, 13 benzene rows."""
    rows = []
    for i in range(1, 26):
        if i % 2:
            rows.append(make_vendor(str(i), "Benzene", "71-43-2"))
        else:
            rows.append(make_vendor(str(i), "Acetone", "67-64-1"))
    return rows


@pytest.fixture
def store(vendors):
    return FakeVendorStore(vendors)


@pytest.fixture
def empty_store():
    return FakeVendorStore()


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    return redis


@pytest.fixture
def vendor_factory():
    return make_vendor


@pytest.fixture
def store_factory():
    return FakeVendorStore
