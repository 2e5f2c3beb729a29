"""
Input parsing and validation utilities.

Raw form values arrive as strings typed by a user. These helpers interpret
them leniently (a leading number is accepted, unparseable input yields None)
so rule validators can decide what an unusable value means. The remaining
helpers guard caller-supplied query arguments.
"""

import re
from datetime import date, datetime
from typing import Any

from admitguard.core.errors import InputValidationError

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)", re.ASCII)
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def is_empty(value: Any) -> bool:
    """
    Return True if a form value counts as not filled in.

    Boolean toggles are never empty: ``False`` is a deliberate answer.

    Examples:
        >>> is_empty("")
        True
        >>> is_empty(None)
        True
        >>> is_empty(False)
        False
        >>> is_empty("  ")
        False
    """
    if isinstance(value, bool):
        return False
    return value is None or value == ""


def is_active(value: Any) -> bool:
    """
    Return True if a field is "switched on": a True toggle or any non-empty text.

    Examples:
        >>> is_active(True)
        True
        >>> is_active(False)
        False
        >>> is_active("Cleared")
        True
    """
    if isinstance(value, bool):
        return value
    return not is_empty(value)


def parse_leading_int(value: Any) -> int | None:
    """
    Parse the integer prefix of a value, ignoring trailing characters.

    Examples:
        >>> parse_leading_int("2019")
        2019
        >>> parse_leading_int(" 42 marks")
        42
        >>> parse_leading_int("12.9")
        12
        >>> parse_leading_int("n/a") is None
        True
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def parse_leading_float(value: Any) -> float | None:
    """
    Parse the decimal-number prefix of a value, ignoring trailing characters.

    Examples:
        >>> parse_leading_float("7.25")
        7.25
        >>> parse_leading_float("59%")
        59.0
        >>> parse_leading_float(".5")
        0.5
        >>> parse_leading_float("") is None
        True
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return float(value)
    match = _LEADING_FLOAT.match(str(value))
    return float(match.group(1)) if match else None


def parse_iso_date(value: Any) -> date | None:
    """
    Parse a YYYY-MM-DD date, returning None when the value is not a valid date.

    Examples:
        >>> parse_iso_date("2000-02-29")
        datetime.date(2000, 2, 29)
        >>> parse_iso_date("2001-02-29") is None
        True
    """
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def age_on(birth_date: date, reference_date: date) -> int:
    """
    Age in whole years on ``reference_date``.

    One year is subtracted when the birthday has not yet occurred in the
    reference year.

    Examples:
        >>> age_on(date(2008, 2, 26), date(2026, 2, 25))
        17
        >>> age_on(date(2008, 2, 25), date(2026, 2, 25))
        18
    """
    age = reference_date.year - birth_date.year
    if (reference_date.month, reference_date.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def validate_limit(limit: int, field_name: str = "limit", max_limit: int = 10000) -> int:
    """
    Validate a limit parameter for queries.

    Args:
        limit: The limit value to validate
        field_name: Name of the field (for error messages)
        max_limit: Maximum allowed limit value

    Returns:
        The validated limit value

    Raises:
        InputValidationError: If validation fails
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InputValidationError(f"{field_name} must be an integer, got {type(limit).__name__}")

    if limit <= 0:
        raise InputValidationError(f"{field_name} must be a positive integer, got {limit}")

    if limit > max_limit:
        raise InputValidationError(f"{field_name} exceeds maximum of {max_limit}")

    return limit


def validate_offset(offset: int, field_name: str = "offset") -> int:
    """
    Validate an offset parameter for queries.

    Raises:
        InputValidationError: If offset is not a non-negative integer
    """
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise InputValidationError(f"{field_name} must be an integer, got {type(offset).__name__}")

    if offset < 0:
        raise InputValidationError(f"{field_name} must be a non-negative integer, got {offset}")

    return offset


def validate_file_path(file_path: str, field_name: str = "file_path") -> str:
    """
    Validate a file path supplied on the command line.

    Returns:
        The validated file path (stripped of whitespace)

    Raises:
        InputValidationError: If the path is empty or contains null bytes
    """
    if not file_path or not isinstance(file_path, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    file_path = file_path.strip()

    if not file_path:
        raise InputValidationError(f"{field_name} cannot be empty or whitespace-only")

    if "\x00" in file_path:
        raise InputValidationError(f"{field_name} contains null bytes")

    if len(file_path) > 4096:  # Linux PATH_MAX
        raise InputValidationError(f"{field_name} exceeds maximum length of 4096 characters")

    return file_path
