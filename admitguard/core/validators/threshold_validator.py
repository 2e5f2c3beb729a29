"""
ThresholdValidator - validates a score against the threshold of its grading scale.
"""

from typing import Any

from admitguard.core.models import EvaluationContext
from admitguard.utils.validation import is_empty, parse_leading_float

from .base_validator import BaseValidator


def _format_number(number: float) -> str:
    text = repr(float(number))
    return text[:-2] if text.endswith(".0") else text


class ThresholdValidator(BaseValidator):
    """
    Validates that a score is not below the threshold for the active scale.

    The scale is chosen by ``context.is_cgpa``. Failure messages name the
    threshold that applied.

    Parameters:
    - percentage: Minimum percentage score
    - cgpa: Minimum CGPA score
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.percentage = self.parameters.get("percentage")
        self.cgpa = self.parameters.get("cgpa")
        if self.percentage is None or self.cgpa is None:
            raise ValueError("ThresholdValidator requires 'percentage' and 'cgpa' parameters")

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        if is_empty(value):
            return

        score = parse_leading_float(value)
        if score is None:
            return

        if context is not None and context.is_cgpa:
            if score < self.cgpa:
                self.fail(f"CGPA is below the recommended {_format_number(self.cgpa)} threshold.")
        elif score < self.percentage:
            self.fail(
                f"Percentage is below the recommended {_format_number(self.percentage)}% threshold."
            )

    @property
    def rule_type(self) -> str:
        return "threshold"
