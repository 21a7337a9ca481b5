import re

from config import NOTES_MAX_LENGTH, PHONE_DIGITS

NON_DIGIT_RE = re.compile(r"\D")
TOKEN_RE = re.compile(r"\S+")


def normalize_phone(value: str) -> str:
    """Collapse a formatted phone number back to its digits."""
    if not value:
        return ""
    return NON_DIGIT_RE.sub("", value)


def format_phone(raw: str) -> str:
    """
    Format keystrokes as (555) 123-4567.
    Partial input gets the longest pattern it can fill.
    """
    digits = normalize_phone(raw)[:PHONE_DIGITS]
    if len(digits) < 4:
        return digits
    if len(digits) < 7:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def capitalize_words(value: str) -> str:
    # Separators are kept as typed so a trailing space survives the next keystroke
    if not value:
        return ""
    return TOKEN_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), value)


def lower_email(value: str) -> str:
    return (value or "").lower()


def cap_notes(value: str) -> str:
    return (value or "")[:NOTES_MAX_LENGTH]


NORMALIZERS = {
    "name": capitalize_words,
    "email": lower_email,
    "phone": format_phone,
    "notes": cap_notes,
}


def normalize_field(name: str, value) -> str:
    value = "" if value is None else str(value)
    normalizer = NORMALIZERS.get(name)
    return normalizer(value) if normalizer else value
