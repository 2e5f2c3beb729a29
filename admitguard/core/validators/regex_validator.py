"""
RegexValidator - validates field values against a regular expression pattern.
"""

import re
from re import Pattern
from typing import Any

from admitguard.core.models import EvaluationContext
from admitguard.utils.validation import is_empty

from .base_validator import BaseValidator


def _anchor_end(pattern: str, flags: int) -> str:
    """Replace an unescaped trailing ``$`` with ``\\Z`` unless MULTILINE is set."""
    if flags & re.MULTILINE or not pattern.endswith("$"):
        return pattern
    # Count the backslashes before the "$"; an odd run escapes it
    escapes = len(pattern[:-1]) - len(pattern[:-1].rstrip("\\"))
    if escapes % 2:
        return pattern
    return pattern[:-1] + r"\Z"


class RegexValidator(BaseValidator):
    """
    Validates that a non-empty field value matches a regular expression pattern.

    Patterns are searched (not implicitly anchored) and compiled with
    re.ASCII so that ``\\d`` and ``\\w`` only match ASCII characters.
    A trailing ``$`` is compiled as ``\\Z`` so it only matches at the very
    end of the value, never before a final newline.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - flags: Optional extra regex flags (e.g., re.IGNORECASE)
    - message: Failure message
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        flags = self.parameters.get("flags", 0) | re.ASCII

        try:
            if isinstance(pattern, str):
                self.pattern: Pattern = re.compile(_anchor_end(pattern, flags), flags)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        """
        Validate that the value matches the regex pattern.

        Raises:
            ValidationError: If value doesn't match the pattern
        """
        # Empty values are the required check's concern
        if is_empty(value) or isinstance(value, bool):
            return

        if not self.pattern.search(str(value)):
            self.fail()

    @property
    def rule_type(self) -> str:
        return "pattern"
