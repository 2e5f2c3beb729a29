"""
Unit tests for input parsing helpers.
"""

from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from admitguard.core.errors import InputValidationError
from admitguard.utils.validation import (
    age_on,
    is_active,
    is_empty,
    parse_iso_date,
    parse_leading_float,
    parse_leading_int,
    validate_file_path,
    validate_limit,
    validate_offset,
)


class TestEmptiness:
    """Tests for is_empty and is_active"""

    @pytest.mark.parametrize("value,expected", [
        ("", True),
        (None, True),
        (" ", False),
        ("x", False),
        (False, False),
        (True, False),
    ])
    def test_is_empty(self, value, expected):
        assert is_empty(value) is expected

    @pytest.mark.parametrize("value,expected", [
        (True, True),
        (False, False),
        ("Cleared", True),
        ("", False),
        (None, False),
    ])
    def test_is_active(self, value, expected):
        assert is_active(value) is expected


class TestNumberParsing:
    """Tests for lenient number parsing"""

    @pytest.mark.parametrize("value,expected", [
        ("2019", 2019),
        (" 42 marks", 42),
        ("12.9", 12),
        ("-3", -3),
        ("n/a", None),
        ("", None),
        (None, None),
        (True, None),
        (7, 7),
    ])
    def test_parse_leading_int(self, value, expected):
        assert parse_leading_int(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("7.25", 7.25),
        ("59%", 59.0),
        (".5", 0.5),
        ("1e2", 100.0),
        ("abc", None),
        ("", None),
    ])
    def test_parse_leading_float(self, value, expected):
        assert parse_leading_float(value) == expected

    @given(st.integers(min_value=-10 ** 9, max_value=10 ** 9), st.text(alphabet="abc %", max_size=5))
    def test_property_int_prefix(self, number, suffix):
        """Property test: an integer followed by non-digits parses to that integer"""
        assert parse_leading_int(f"{number}{suffix}") == number


class TestDates:
    """Tests for date parsing and age computation"""

    def test_parse_iso_date(self):
        assert parse_iso_date("2000-02-29") == date(2000, 2, 29)
        assert parse_iso_date(" 2000-01-05 ") == date(2000, 1, 5)

    @pytest.mark.parametrize("value", ["2001-02-29", "05/10/2000", "", None, 20000510])
    def test_parse_iso_date_invalid(self, value):
        assert parse_iso_date(value) is None

    @pytest.mark.parametrize("birth,expected", [
        (date(2008, 2, 26), 17),
        (date(2008, 2, 25), 18),
        (date(1990, 2, 24), 36),
        (date(1990, 12, 31), 35),
    ])
    def test_age_on_reference_date(self, birth, expected):
        assert age_on(birth, date(2026, 2, 25)) == expected


class TestArgumentValidation:
    """Tests for query argument guards"""

    def test_valid_arguments(self):
        assert validate_limit(10) == 10
        assert validate_offset(0) == 0
        assert validate_file_path("  form.yaml ") == "form.yaml"

    @pytest.mark.parametrize("limit", [0, -5, 10001, "10", True])
    def test_invalid_limit(self, limit):
        with pytest.raises(InputValidationError):
            validate_limit(limit)

    @pytest.mark.parametrize("offset", [-1, 1.5, None])
    def test_invalid_offset(self, offset):
        with pytest.raises(InputValidationError):
            validate_offset(offset)

    @pytest.mark.parametrize("path", ["", "   ", "bad\x00path", "x" * 4097])
    def test_invalid_file_path(self, path):
        with pytest.raises(InputValidationError):
            validate_file_path(path)
