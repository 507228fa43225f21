"""Lead repository — appends search requests and contact submissions."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import StoreUnavailableError
from src.models.lead import ContactSubmission, SearchRequest
from src.schemas.lead import ContactSubmissionIn, SearchRequestIn

logger = structlog.get_logger()


class LeadRepository:
    """Write-only: leads are never read back by the application."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _append(self, row, event: str, **context) -> None:
        self.db.add(row)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{event}_failed", error=str(e), **context)
            raise StoreUnavailableError("Failed to submit request") from e

        logger.info(event, id=str(row.id), **context)

    async def create_search_request(self, data: SearchRequestIn) -> SearchRequest:
        """Record a "chemical not found" request.

        Args:
            data: Form payload, including the query the visitor searched for

        Returns:
            Created SearchRequest row
        """
        data.validate_required()
        row = SearchRequest(
            chemical_name=data.chemical_name.strip(),
            cas_number=data.cas_number.strip(),
            contact_info=data.contact_info.strip(),
            searched_query=data.searched_query,
            requested_at=datetime.now(timezone.utc),
        )
        await self._append(row, "search_request_created", searched_query=data.searched_query)
        return row

    async def create_contact_submission(self, data: ContactSubmissionIn) -> ContactSubmission:
        data.validate_required()
        row = ContactSubmission(
            name=data.name.strip(),
            email=data.email.strip(),
            message=data.message.strip(),
        )
        await self._append(row, "contact_submission_created")
        return row
