"""Vendor directory model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class Vendor(Base):
    """One row of the chemical vendor directory.

    Column names follow the existing ``vendors_list`` table. ``Srno`` is a
    string-encoded integer assigned by the dashboard and is the record's
    identity.
    """

    __tablename__ = "vendors_list"

    sr_no: Mapped[str] = mapped_column("Srno", String(20), primary_key=True)
    chemical_name: Mapped[str] = mapped_column("Chemicalname", String(500), nullable=False)
    category: Mapped[str] = mapped_column("Category", String(200), nullable=False)
    cas_no: Mapped[str] = mapped_column("Casno", String(100), nullable=False)
    supplier_name: Mapped[str] = mapped_column("Suppliername", String(500), nullable=False)
    contact_info: Mapped[str] = mapped_column("Email&link", Text, nullable=False)
    phone_number: Mapped[str] = mapped_column("Phoneno", String(100), nullable=False)
    business_status: Mapped[str] = mapped_column("Businessstatus", String(200), nullable=False)
    country: Mapped[str] = mapped_column("Country", String(100), nullable=False)
