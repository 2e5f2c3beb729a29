"""
MinLengthValidator - validates text values meet a minimum length.
"""

from typing import Any

from admitguard.core.models import EvaluationContext
from admitguard.utils.validation import is_empty

from .base_validator import BaseValidator


class MinLengthValidator(BaseValidator):
    """
    Validates that a non-empty text value has at least ``min_length`` characters.

    Parameters:
    - min_length: Minimum number of characters (inclusive)
    - message: Failure message
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_length = self.parameters.get("min_length")
        if self.min_length is None:
            raise ValueError("MinLengthValidator requires 'min_length' parameter")

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        """
        Raises:
            ValidationError: If the value is shorter than min_length
        """
        # Empty values are the required check's concern
        if is_empty(value) or isinstance(value, bool):
            return

        if len(str(value)) < self.min_length:
            self.fail()

    @property
    def rule_type(self) -> str:
        return "min_length"
