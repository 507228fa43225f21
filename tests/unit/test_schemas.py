"""Tests for form validation rules."""

import pytest

from src.core.exceptions import ErrorKind, ValidationError
from src.schemas.lead import ContactSubmissionIn, MemberLoginIn, MemberRegisterIn, SearchRequestIn
from src.schemas.vendor import VendorForm


def register(**overrides) -> MemberRegisterIn:
    values = {
        "name": "Asha",
        "company": "Asha Labs",
        "email": "asha@labs.example",
        "mobile": "9876543210",
        "password": "longenough",
        "confirm_password": "longenough",
    }
    values.update(overrides)
    return MemberRegisterIn(**values)


class TestVendorForm:
    def test_all_blank(self):
        assert len(VendorForm().missing_fields()) == 8

    def test_whitespace_counts_as_missing(self):
        form = VendorForm(chemical_name=" ")
        assert "chemical_name" in form.missing_fields()

    def test_error_kind(self):
        with pytest.raises(ValidationError) as exc:
            VendorForm().require_complete()
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_rejects_unknown_fields(self):
        with pytest.raises(Exception):
            VendorForm(notes="free text")


class TestLeadForms:
    def test_search_request_requires_contact(self):
        data = SearchRequestIn(chemical_name="X", cas_number="1-2-3", contact_info="")
        with pytest.raises(ValidationError):
            data.validate_required()

    def test_contact_requires_valid_email(self):
        data = ContactSubmissionIn(name="A", email="not-an-email", message="hi")
        with pytest.raises(ValidationError, match="valid email"):
            data.validate_required()


class TestMemberForms:
    def test_login_short_password(self):
        with pytest.raises(ValidationError, match="at least 6"):
            MemberLoginIn(email="a@b.co", password="12345").validate_required()

    def test_register_valid(self):
        register().validate_required()

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"company": " "}, "Company name is required"),
            ({"mobile": "12345"}, "10 digits"),
            ({"password": "short", "confirm_password": "short"}, "at least 8"),
            ({"confirm_password": "different1"}, "do not match"),
            ({"email": "nope"}, "valid email"),
        ],
    )
    def test_register_rules(self, overrides, message):
        with pytest.raises(ValidationError, match=message):
            register(**overrides).validate_required()
