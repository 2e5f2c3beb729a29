"""
RangeValidator - validates numeric text values are within a specified range.
"""

from typing import Any

from admitguard.core.models import EvaluationContext
from admitguard.utils.validation import is_empty, parse_leading_float, parse_leading_int

from .base_validator import BaseValidator


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field is within a specified range.

    The raw value is parsed leniently (leading number only). Empty or
    unparseable values pass; they are not numbers to compare.

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)
    - parse: "int" (default) or "float"
    - message: Failure message
    """

    PARSERS = {
        "int": parse_leading_int,
        "float": parse_leading_float,
    }

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_value = self.parameters.get("min")
        self.max_value = self.parameters.get("max")

        if self.min_value is None and self.max_value is None:
            raise ValueError("RangeValidator requires at least one of: min, max")

        parse = self.parameters.get("parse", "int")
        if parse not in self.PARSERS:
            raise ValueError(f"Unknown parse mode '{parse}', expected one of {sorted(self.PARSERS)}")
        self.parse = self.PARSERS[parse]

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        """
        Raises:
            ValidationError: If the parsed value is outside the range
        """
        if is_empty(value):
            return

        number = self.parse(value)
        if number is None:
            return

        if self.min_value is not None and number < self.min_value:
            self.fail()

        if self.max_value is not None and number > self.max_value:
            self.fail()

    @property
    def rule_type(self) -> str:
        return "range"
