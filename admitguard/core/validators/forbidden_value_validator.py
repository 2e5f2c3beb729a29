"""
ForbiddenValueValidator - rejects one specific value.
"""

from typing import Any

from admitguard.core.models import EvaluationContext

from .base_validator import BaseValidator


class ForbiddenValueValidator(BaseValidator):
    """
    Validates that a field does not hold a forbidden value.

    Parameters:
    - forbidden_value: Value that always fails (exact match)
    - message: Failure message
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        if "forbidden_value" not in self.parameters:
            raise ValueError("ForbiddenValueValidator requires 'forbidden_value' parameter")
        self.forbidden_value = self.parameters["forbidden_value"]

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        if value == self.forbidden_value:
            self.fail()

    @property
    def rule_type(self) -> str:
        return "forbidden"
