import pytest

from formatting import capitalize_words, format_phone, normalize_field, normalize_phone


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ""),
        ("5", "5"),
        ("555", "555"),
        ("5551", "(555) 1"),
        ("555123", "(555) 123"),
        ("5551234", "(555) 123-4"),
        ("5551234567", "(555) 123-4567"),
        ("555-123-4567", "(555) 123-4567"),
        ("555123456789", "(555) 123-4567"),
    ],
)
def test_format_phone_handles_partial_input(raw, expected):
    assert format_phone(raw) == expected


def test_format_phone_is_idempotent():
    for raw in ["", "55", "5551", "555123", "5551234", "5551234567", "(555) 123-4567 x9"]:
        once = format_phone(raw)
        assert format_phone(once) == once


def test_normalize_undoes_format_for_short_digit_strings():
    digits = "5551234567"
    for length in range(len(digits) + 1):
        assert normalize_phone(format_phone(digits[:length])) == digits[:length]


def test_normalize_phone_strips_punctuation():
    assert normalize_phone("(555) 123-4567") == "5551234567"
    assert normalize_phone(None) == ""


def test_capitalize_words():
    assert capitalize_words("john smith") == "John Smith"
    assert capitalize_words("mARY  o'NEIL") == "Mary  O'neil"
    assert capitalize_words("john ") == "John "


def test_capitalize_words_is_idempotent():
    for value in ["john smith", "JOHN SMITH", " ann  lee ", ""]:
        once = capitalize_words(value)
        assert capitalize_words(once) == once


def test_normalize_field_dispatch():
    assert normalize_field("email", "JOHN@X.COM") == "john@x.com"
    assert normalize_field("notes", "x" * 600) == "x" * 500
    assert normalize_field("source", "Walk-In") == "Walk-In"
    assert normalize_field("referred_by", None) == ""
