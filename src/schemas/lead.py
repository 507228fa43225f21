"""Lead capture and member auth payloads."""

from __future__ import annotations

import re

from pydantic import BaseModel

from src.core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _require(**fields: str) -> None:
    for name, value in fields.items():
        if not value.strip():
            raise ValidationError(f"{name} is required")


def _require_email(email: str) -> None:
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")


class SearchRequestIn(BaseModel):
    chemical_name: str
    cas_number: str
    contact_info: str
    searched_query: str = ""

    def validate_required(self) -> None:
        _require(
            **{
                "Chemical name": self.chemical_name,
                "CAS number": self.cas_number,
                "Contact info": self.contact_info,
            }
        )


class ContactSubmissionIn(BaseModel):
    name: str
    email: str
    message: str

    def validate_required(self) -> None:
        _require(Name=self.name, Email=self.email, Message=self.message)
        _require_email(self.email)


class MemberLoginIn(BaseModel):
    email: str
    password: str

    def validate_required(self) -> None:
        _require_email(self.email)
        if len(self.password) < 6:
            raise ValidationError("Password must be at least 6 characters")


class MemberRegisterIn(BaseModel):
    name: str
    company: str
    email: str
    mobile: str
    password: str
    confirm_password: str

    def validate_required(self) -> None:
        _require_email(self.email)
        if not self.company.strip():
            raise ValidationError("Company name is required")
        if len(self.mobile) != 10 or not self.mobile.isdigit():
            raise ValidationError("Mobile number must be 10 digits")
        if len(self.password) < 8:
            raise ValidationError("Password must be at least 8 characters")
        if self.password != self.confirm_password:
            raise ValidationError("Passwords do not match")


class AdminLoginIn(BaseModel):
    username: str = ""
    password: str = ""
