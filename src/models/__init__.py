"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.lead import ContactSubmission, SearchRequest
from src.models.member import Member
from src.models.vendor import Vendor

__all__ = [
    "Base",
    "ContactSubmission",
    "Member",
    "SearchRequest",
    "Vendor",
]
