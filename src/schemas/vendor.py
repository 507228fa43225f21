"""Vendor record and form schemas."""

from __future__ import annotations

from pydantic import BaseModel

from src.core.exceptions import ValidationError

FIELD_LABELS = {
    "sr_no": "Sr. No",
    "chemical_name": "Chemical Name",
    "category": "Category",
    "cas_no": "CAS Number",
    "supplier_name": "Supplier Name",
    "contact_info": "Email / Link",
    "phone_number": "Phone Number",
    "business_status": "Business Status",
    "country": "Country",
}


class VendorFields(BaseModel):
    """The eight editable vendor fields."""

    chemical_name: str = ""
    category: str = ""
    cas_no: str = ""
    supplier_name: str = ""
    contact_info: str = ""
    phone_number: str = ""
    business_status: str = ""
    country: str = ""

    model_config = {"extra": "forbid"}

    def missing_fields(self) -> list[str]:
        """Names of fields that are empty after trimming whitespace."""
        return [
            name for name, value in self.model_dump().items()
            if not str(value).strip()
        ]

    def require_complete(self) -> None:
        missing = self.missing_fields()
        if missing:
            labels = ", ".join(FIELD_LABELS[name] for name in missing)
            raise ValidationError(f"Please fill in all required fields: {labels}")


class VendorForm(VendorFields):
    """Add-vendor form state. Sequence number is assigned, never typed."""


class VendorRecord(VendorFields):
    """A stored vendor. Identity is ``sr_no``; every other field is mutable."""

    sr_no: str

    model_config = {"extra": "forbid", "from_attributes": True}

    def fields(self) -> VendorFields:
        return VendorFields(**self.model_dump(exclude={"sr_no"}))
