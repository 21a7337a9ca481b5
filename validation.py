import re
from typing import Optional

from pydantic import BaseModel

from config import NOTES_MAX_LENGTH, PHONE_DIGITS, SERVICE_TYPES, SOURCE_OPTIONS, STAFF_MEMBERS
from formatting import normalize_phone

EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)

FIELD_ORDER = ["name", "email", "phone", "service_type", "source", "notes", "assigned_to"]


class IntakeValidationError(ValueError):
    """One or more intake fields failed validation."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))
        self.errors = errors


def _as_dict(values) -> dict:
    if isinstance(values, BaseModel):
        return values.model_dump()
    return dict(values or {})


def _text(values: dict, field: str) -> str:
    value = values.get(field)
    return "" if value is None else str(value).strip()


def _check_name(values):
    if not _text(values, "name"):
        return "Name is required"


def _check_email(values):
    email = _text(values, "email")
    if not email:
        return "Email is required"
    if not EMAIL_RE.match(email):
        return "Invalid email address"


def _check_phone(values):
    phone = _text(values, "phone")
    if not phone:
        return "Phone is required"
    if len(normalize_phone(phone)) < PHONE_DIGITS:
        return "Phone must be 10 digits"


def _check_service_type(values):
    if _text(values, "service_type") not in SERVICE_TYPES:
        return "Service type is required"


def _check_source(values):
    if _text(values, "source") not in SOURCE_OPTIONS:
        return "Source is required"


def _check_notes(values):
    if len(values.get("notes") or "") > NOTES_MAX_LENGTH:
        return f"Notes must be {NOTES_MAX_LENGTH} characters or fewer"


def _check_assigned_to(values):
    assignee = _text(values, "assigned_to")
    if assignee and assignee not in STAFF_MEMBERS:
        return "Unknown staff member"


RULES = {
    "name": _check_name,
    "email": _check_email,
    "phone": _check_phone,
    "service_type": _check_service_type,
    "source": _check_source,
    "notes": _check_notes,
    "assigned_to": _check_assigned_to,
}


def validate_field(field: str, values) -> Optional[str]:
    rule = RULES.get(field)
    if rule is None:
        return None
    return rule(_as_dict(values))


def validate_intake(values) -> dict[str, str]:
    data = _as_dict(values)
    errors = {}
    for field in FIELD_ORDER:
        message = RULES[field](data)
        if message:
            errors[field] = message
    return errors


def ensure_valid(values) -> None:
    errors = validate_intake(values)
    if errors:
        raise IntakeValidationError(errors)
