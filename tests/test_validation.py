import pytest

from models import ClientIntake
from validation import IntakeValidationError, ensure_valid, validate_field, validate_intake

VALID = {
    "name": "John Smith",
    "email": "john@x.com",
    "phone": "(555) 123-4567",
    "service_type": "Personal Tax Return",
    "source": "Walk-In",
}


def test_valid_intake_has_no_errors():
    assert validate_intake(VALID) == {}
    assert validate_intake(ClientIntake(**VALID)) == {}


def test_empty_intake_reports_every_required_field():
    errors = validate_intake(ClientIntake())
    assert errors == {
        "name": "Name is required",
        "email": "Email is required",
        "phone": "Phone is required",
        "service_type": "Service type is required",
        "source": "Source is required",
    }


@pytest.mark.parametrize("email", ["john", "john@x", "john@x.c", "jo hn@x.com"])
def test_bad_email_shape(email):
    assert validate_field("email", {**VALID, "email": email}) == "Invalid email address"


def test_email_shape_is_case_insensitive():
    assert validate_field("email", {**VALID, "email": "JOHN@X.COM"}) is None


def test_short_phone():
    assert validate_field("phone", {**VALID, "phone": "(555) 123-45"}) == "Phone must be 10 digits"


def test_unknown_options_count_as_missing():
    assert validate_field("service_type", {**VALID, "service_type": "Bookkeeping"}) == "Service type is required"
    assert validate_field("source", {**VALID, "source": "Billboard"}) == "Source is required"


def test_optional_fields():
    assert validate_field("notes", {**VALID, "notes": "x" * 501}) == "Notes must be 500 characters or fewer"
    assert validate_field("assigned_to", {**VALID, "assigned_to": "Nobody"}) == "Unknown staff member"
    assert validate_field("referred_by", VALID) is None


def test_ensure_valid_raises_with_field_errors():
    with pytest.raises(IntakeValidationError) as exc_info:
        ensure_valid({**VALID, "name": "  "})
    assert exc_info.value.errors == {"name": "Name is required"}
