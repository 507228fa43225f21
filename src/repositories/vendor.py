"""Vendor repository — queries and mutations against ``vendors_list``."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

import structlog
from sqlalchemy import BigInteger, case, cast, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.exceptions import (
    DuplicateSequenceError,
    NotFoundError,
    StoreUnavailableError,
)
from src.models.vendor import Vendor
from src.schemas.vendor import VendorRecord
from src.search.pagination import PageWindow

logger = structlog.get_logger()


class VendorStore(Protocol):
    """What the search and mutation controllers need from the store."""

    async def search(
        self,
        query: str,
        window: PageWindow,
        order_by_sequence: bool = False,
    ) -> tuple[list[VendorRecord], int]: ...

    async def list_sequence_numbers(self) -> list[str]: ...

    async def get(self, sr_no: str) -> VendorRecord: ...

    async def insert(self, record: VendorRecord) -> None: ...

    async def update(self, record: VendorRecord) -> None: ...

    async def delete(self, sr_no: str) -> None: ...


def matches_query(query: str):
    """Case-insensitive substring match on CAS number OR chemical name."""
    return or_(
        Vendor.cas_no.icontains(query, autoescape=True),
        Vendor.chemical_name.icontains(query, autoescape=True),
    )


NUMERIC_SR_NO = r"^[0-9]{1,18}$"


def sequence_order():
    """Numeric order for integer sequence numbers; anything else sorts last, as text."""
    numeric = case(
        (Vendor.sr_no.regexp_match(NUMERIC_SR_NO), cast(Vendor.sr_no, BigInteger)),
    )
    return numeric.asc().nullslast(), Vendor.sr_no.asc()


def to_record(vendor: Vendor) -> VendorRecord:
    return VendorRecord.model_validate(vendor)


class VendorRepository:
    """SQLAlchemy-backed ``VendorStore``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _store_errors(self, action: str, **context) -> AsyncIterator[None]:
        """Roll back and translate SQLAlchemy failures into ``StoreUnavailableError``."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("vendor_store_error", action=action, error=str(e), **context)
            raise StoreUnavailableError(f"Could not {action} vendors") from e

    def build_search(self, query: str, order_by_sequence: bool = False):
        """Filtered select (no paging). Empty ``query`` matches every row."""
        stmt = select(Vendor)
        if query:
            stmt = stmt.where(matches_query(query))
        if order_by_sequence:
            stmt = stmt.order_by(*sequence_order())
        return stmt

    async def search(
        self,
        query: str,
        window: PageWindow,
        order_by_sequence: bool = False,
    ) -> tuple[list[VendorRecord], int]:
        """Fetch one page of matches plus the exact total match count."""
        stmt = self.build_search(query, order_by_sequence)

        async with self._store_errors("search", query=query, page=window.page):
            count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
            total = (await self.db.execute(count_stmt)).scalar_one()

            result = await self.db.execute(stmt.offset(window.offset).limit(window.limit))
            rows = result.scalars().all()

        return [to_record(row) for row in rows], total

    async def list_sequence_numbers(self) -> list[str]:
        """Every stored sequence number, unpaginated."""
        async with self._store_errors("read"):
            result = await self.db.execute(select(Vendor.sr_no))
            return list(result.scalars().all())

    async def get(self, sr_no: str) -> VendorRecord:
        async with self._store_errors("read", sr_no=sr_no):
            result = await self.db.execute(select(Vendor).where(Vendor.sr_no == sr_no))
            vendor = result.scalar_one_or_none()
        if vendor is None:
            raise NotFoundError(f"Vendor {sr_no} not found")
        return to_record(vendor)

    async def insert(self, record: VendorRecord) -> None:
        self.db.add(Vendor(**record.model_dump()))
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("vendor_duplicate_sequence", sr_no=record.sr_no)
            raise DuplicateSequenceError(
                f"Sr. No {record.sr_no} is already taken. Please try again."
            ) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("vendor_store_error", action="insert", error=str(e))
            raise StoreUnavailableError("Could not insert vendors") from e

        logger.info("vendor_inserted", sr_no=record.sr_no)

    async def update(self, record: VendorRecord) -> None:
        """Write every field except ``sr_no`` back, keyed by ``sr_no``."""
        values = record.fields().model_dump()
        async with self._store_errors("update", sr_no=record.sr_no):
            result = await self.db.execute(
                update(Vendor).where(Vendor.sr_no == record.sr_no).values(**values)
            )
            await self.db.commit()
        if result.rowcount == 0:
            raise NotFoundError(f"Vendor {record.sr_no} not found")

        logger.info("vendor_updated", sr_no=record.sr_no)

    async def delete(self, sr_no: str) -> None:
        async with self._store_errors("delete", sr_no=sr_no):
            result = await self.db.execute(delete(Vendor).where(Vendor.sr_no == sr_no))
            await self.db.commit()
        if result.rowcount == 0:
            raise NotFoundError(f"Vendor {sr_no} not found")

        logger.info("vendor_deleted", sr_no=sr_no)


class SessionScopedVendorStore:
    """``VendorStore`` that opens a fresh session for every call.

    Long-lived consumers (WebSocket connections) issue overlapping fetches;
    an ``AsyncSession`` must not be shared between concurrent operations.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def search(
        self,
        query: str,
        window: PageWindow,
        order_by_sequence: bool = False,
    ) -> tuple[list[VendorRecord], int]:
        async with self.session_factory() as db:
            return await VendorRepository(db).search(query, window, order_by_sequence)

    async def list_sequence_numbers(self) -> list[str]:
        async with self.session_factory() as db:
            return await VendorRepository(db).list_sequence_numbers()

    async def get(self, sr_no: str) -> VendorRecord:
        async with self.session_factory() as db:
            return await VendorRepository(db).get(sr_no)

    async def insert(self, record: VendorRecord) -> None:
        async with self.session_factory() as db:
            await VendorRepository(db).insert(record)

    async def update(self, record: VendorRecord) -> None:
        async with self.session_factory() as db:
            await VendorRepository(db).update(record)

    async def delete(self, sr_no: str) -> None:
        async with self.session_factory() as db:
            await VendorRepository(db).delete(sr_no)
