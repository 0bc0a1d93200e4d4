from __future__ import annotations

import pytest

from pynojs.directives.validation import validate


@pytest.mark.parametrize(
    ("kind", "value", "expected"),
    [
        ("email", "a@b.com", True),
        ("email", "a@b", False),
        ("securePassword", "Passw0rd!", True),
        ("securePassword", "password", False),
        ("phone", "5551234567", True),
        ("phone", "555-1234", False),
        ("url", "https://example.com/path", True),
        ("url", "not a url", False),
        ("date", "2024-01-31", True),
        ("date", "31/01/2024", False),
        ("number", "12345", True),
        ("number", "12a", False),
        ("postalCode", "12345", True),
        ("postalCode", "1234", False),
        ("creditCard", "4111111111111111", True),
        ("creditCard", "4111", False),
        ("alphanumeric", "abc123", True),
        ("alphanumeric", "abc 123", False),
    ],
)
def test_builtin_kinds(kind: str, value: str, expected: bool) -> None:
    assert validate(kind, value) is expected


def test_length_bounds_read_format() -> None:
    assert validate("minLength", "ab", "3") is False
    assert validate("minLength", "abc", "3") is True
    assert validate("maxLength", "abcd", "3") is False
    assert validate("maxLength", "ab", "3") is True


def test_length_without_numeric_format_fails() -> None:
    assert validate("minLength", "abc") is False
    assert validate("maxLength", "abc", "three") is False


def test_format_overrides_selected_kinds() -> None:
    assert validate("phone", "555-1234", r"^\d{3}-\d{4}$") is True
    assert validate("postalCode", "1234-567", r"^\d{4}-\d{3}$") is True
    # Kinds without an override keep their built-in pattern.
    assert validate("email", "a@b", r".*") is False


def test_custom_pattern() -> None:
    assert validate("customPattern", "ABC", "^[A-Z]+$") is True
    assert validate("customPattern", "abc", "^[A-Z]+$") is False
    assert validate("customPattern", "anything") is True
    assert validate("customPattern", "x", "([") is False


def test_unknown_kind_passes() -> None:
    assert validate("shoeSize", "") is True
