"""
Unit tests for input validation helpers.
"""

import pytest

from barkbuddy.schemas.profile import OwnerFields
from barkbuddy.utils.validators import (
    field_warnings,
    parse_hourly_rate,
    sanitize_string,
    validate_phone,
    validate_state_code,
    validate_zip_code,
)


class TestParseHourlyRate:
    """Lenient hourly rate parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("15", 15.0),
        ("15.5", 15.5),
        ("$22.50", 22.5),
        (" 18 ", 18.0),
        (".75", 0.75),
    ])
    def test_valid(self, text, expected):
        assert parse_hourly_rate(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "-5", "1e3", "nan", "inf", "12,50", "1_000"])
    def test_invalid(self, text):
        assert parse_hourly_rate(text) is None


class TestSanitizeString:
    """String cleanup before writes."""

    def test_strips_and_truncates(self):
        assert sanitize_string("  hello\x00 world  ", 8) == "hello"

    def test_non_string(self):
        assert sanitize_string(42) == "42"


class TestFieldChecks:
    """Advisory contact field checks."""

    def test_formats(self):
        assert validate_phone("(206) 555-0123")
        assert not validate_phone("555-0123")
        assert validate_zip_code("98101")
        assert validate_zip_code("98101-1234")
        assert not validate_zip_code("9810")
        assert validate_state_code("wa")
        assert not validate_state_code("ZZ")

    def test_warnings_skip_empty_fields(self):
        assert field_warnings(OwnerFields()) == []

    def test_warnings_reported(self):
        fields = OwnerFields(phone_number="123", zip_code="abc", state="Oregon")

        warnings = field_warnings(fields)

        assert len(warnings) == 3
