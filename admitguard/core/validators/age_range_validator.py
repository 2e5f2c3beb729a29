"""
AgeRangeValidator - validates the age derived from a date of birth.
"""

from datetime import date
from typing import Any

from admitguard.core.models import EvaluationContext
from admitguard.utils.validation import age_on, is_empty, parse_iso_date

from .base_validator import BaseValidator


class AgeRangeValidator(BaseValidator):
    """
    Validates that a candidate's age on a fixed reference date is within range.

    The failure message embeds the computed age:
    ``"Candidate age is {age}. {message}"``. Unparseable dates pass.

    Parameters:
    - min_age: Minimum age (inclusive)
    - max_age: Maximum age (inclusive)
    - reference_date: Date on which the age is computed
    - message: Failure message
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_age = self.parameters.get("min_age")
        self.max_age = self.parameters.get("max_age")
        if self.min_age is None or self.max_age is None:
            raise ValueError("AgeRangeValidator requires 'min_age' and 'max_age' parameters")

        self.reference_date: date = self.parameters.get("reference_date") or date.today()

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        if is_empty(value):
            return

        birth_date = parse_iso_date(value)
        if birth_date is None:
            return

        age = age_on(birth_date, self.reference_date)
        if age < self.min_age or age > self.max_age:
            self.fail(f"Candidate age is {age}. {self.message}")

    @property
    def rule_type(self) -> str:
        return "age_range"
