"""
Base validator interface for all validation rules.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any

from admitguard.core.models import EvaluationContext


class ValidationError(Exception):
    """Raised when a validation check fails."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements one check (required, min_length, pattern,
    forbidden, dependency, age_range, range, threshold). A rule is evaluated
    as an ordered list of validators; the first one to raise decides the outcome.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Check-specific parameters (e.g., min/max for range);
                        "message" is the failure message
        """
        self.field_name = field_name
        self.parameters = parameters or {}
        self.message = self.parameters.get("message") or f"Invalid value for {field_name}"

    @abstractmethod
    def validate(
        self,
        value: Any,
        record: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> None:
        """
        Validate a value against this check.

        Args:
            value: The field value to validate
            record: All form values (for cross-field checks)
            context: Evaluation toggles such as the CGPA mode

        Raises:
            ValidationError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the check identifier."""
        pass

    def fail(self, message: str | None = None) -> None:
        raise ValidationError(
            rule_name=self.rule_type,
            field_name=self.field_name,
            message=message or self.message,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
