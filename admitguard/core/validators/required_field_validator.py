"""
RequiredFieldValidator - ensures a field is filled in.
"""

from typing import Any

from admitguard.core.models import EvaluationContext
from admitguard.utils.validation import is_empty

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is filled in.

    Fails if the value is None or an empty string. Boolean toggles are
    always considered filled. Whitespace-only text counts as filled, matching
    what the intake form has always accepted.
    """

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        """
        Validate that the field is filled in.

        Raises:
            ValidationError: If the value is empty
        """
        if is_empty(value):
            self.fail()

    @property
    def rule_type(self) -> str:
        return "required"
