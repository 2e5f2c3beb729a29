"""
DependencyValidator - cross-field constraint on another field's value.
"""

from typing import Any

from admitguard.core.models import EvaluationContext
from admitguard.utils.validation import is_active

from .base_validator import BaseValidator


class DependencyValidator(BaseValidator):
    """
    Validates that when this field is active, another field holds an allowed value.

    A field is active when it is a True toggle or holds any non-empty text.
    An inactive field always passes.

    Parameters:
    - on_field: Name of the field that is inspected
    - allowed_values: Values of ``on_field`` that permit this field to be active
    - message: Failure message
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.on_field = self.parameters.get("on_field")
        if not self.on_field:
            raise ValueError("DependencyValidator requires 'on_field' parameter")
        self.allowed_values = list(self.parameters.get("allowed_values") or [])

    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        """
        Raises:
            ValidationError: If the field is active and ``on_field`` holds a disallowed value
        """
        if not is_active(value):
            return

        if record.get(self.on_field) not in self.allowed_values:
            self.fail()

    @property
    def rule_type(self) -> str:
        return "dependency"
