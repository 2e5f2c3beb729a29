"""
Validation check implementations.

Provides validators for required fields, minimum length, regex patterns,
forbidden values, cross-field dependencies, age ranges, numeric ranges,
score thresholds and exception rationales.
"""

from .age_range_validator import AgeRangeValidator
from .base_validator import BaseValidator, ValidationError
from .dependency_validator import DependencyValidator
from .forbidden_value_validator import ForbiddenValueValidator
from .min_length_validator import MinLengthValidator
from .range_validator import RangeValidator
from .rationale_validator import RationaleValidator, validate_rationale
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator
from .threshold_validator import ThresholdValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "MinLengthValidator",
    "RegexValidator",
    "ForbiddenValueValidator",
    "DependencyValidator",
    "AgeRangeValidator",
    "RangeValidator",
    "ThresholdValidator",
    "RationaleValidator",
    "validate_rationale",
]
