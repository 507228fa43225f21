"""Lead capture models — write-only records from the public forms."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin, UUIDMixin


class SearchRequest(Base, UUIDMixin, TimestampMixin):
    """A visitor asking for a chemical the directory did not return."""

    __tablename__ = "search_requests"

    chemical_name: Mapped[str] = mapped_column(String(500), nullable=False)
    cas_number: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_info: Mapped[str] = mapped_column(String(300), nullable=False)
    searched_query: Mapped[str] = mapped_column(String(500), default="")
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class ContactSubmission(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "contact_submissions"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(300), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
