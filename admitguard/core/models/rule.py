"""
Rule models: one declarative rule per form field.

Rules form a tagged union discriminated by ``rule_type``. A ``strict`` rule
bundles ordered hard checks (required, min length, pattern, forbidden value,
dependency) whose failure blocks submission. The soft kinds (``age_range``,
``year_range``, ``threshold``, ``minimum``) produce warnings that a justified
exception can override.
"""

import re
from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

DEFAULT_REFERENCE_DATE = date(2026, 2, 25)


class Dependency(BaseModel):
    """
    Cross-field constraint: this field may only be active when another
    field holds one of the allowed values.

    Attributes:
        on_field: Name of the field whose value is inspected
        allowed_values: Values of ``on_field`` that permit this field to be active
    """

    on_field: str = Field(..., min_length=1)
    allowed_values: list[str] = Field(default_factory=list)

    class Config:
        frozen = True


class StrictRule(BaseModel):
    """
    Hard validation rule. Checks run in a fixed order and the first failure wins.

    Attributes:
        required: Field must be non-empty
        min_length: Minimum length of a non-empty value
        pattern: Regular expression a non-empty value must match
        forbidden_value: Value the field must never hold
        dependency: Cross-field constraint applied when the field is active
        error_message: Default failure message
        required_message: Message for an empty required value (falls back to error_message)
        forbidden_message: Message for the forbidden value (falls back to error_message)
    """

    rule_type: Literal["strict"] = "strict"
    required: bool = False
    min_length: int | None = Field(None, ge=1)
    pattern: str | None = None
    forbidden_value: str | None = None
    dependency: Dependency | None = None
    error_message: str = Field(..., min_length=1)
    required_message: str | None = None
    forbidden_message: str | None = None

    @field_validator("pattern")
    @classmethod
    def check_pattern_compiles(cls, v):
        """Reject patterns that are not valid regular expressions."""
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern: {e}")
        return v

    @property
    def severity(self) -> str:
        return "error"

    @property
    def exception_allowed(self) -> bool:
        return False

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "rule_type": "strict",
                "required": True,
                "pattern": r"^[6-9]\d{9}$",
                "error_message": "Phone must be 10 digits starting with 6, 7, 8, or 9.",
                "required_message": "Phone number is required.",
            }
        }


class SoftRule(BaseModel):
    """Common attributes of every overridable rule."""

    error_message: str = Field(..., min_length=1)
    exception_allowed: bool = True

    @property
    def severity(self) -> str:
        return "warning"

    class Config:
        frozen = True


def _check_bounds(bounds: tuple[int, int], name: str) -> tuple[int, int]:
    low, high = bounds
    if low > high:
        raise ValueError(f"{name} lower bound {low} exceeds upper bound {high}")
    return bounds


class AgeRangeRule(SoftRule):
    """Warn when the age derived from a birth date falls outside a range."""

    rule_type: Literal["age_range"] = "age_range"
    age_range: tuple[int, int]
    reference_date: date = DEFAULT_REFERENCE_DATE

    @field_validator("age_range")
    @classmethod
    def check_age_range(cls, v):
        return _check_bounds(v, "age_range")


class YearRangeRule(SoftRule):
    """Warn when an integer year falls outside a range."""

    rule_type: Literal["year_range"] = "year_range"
    year_range: tuple[int, int]

    @field_validator("year_range")
    @classmethod
    def check_year_range(cls, v):
        return _check_bounds(v, "year_range")


class Thresholds(BaseModel):
    """Minimum acceptable score on each grading scale."""

    percentage: float = Field(..., ge=0)
    cgpa: float = Field(..., ge=0)

    class Config:
        frozen = True


class ThresholdRule(SoftRule):
    """Warn when a score is below the threshold of the active grading scale."""

    rule_type: Literal["threshold"] = "threshold"
    thresholds: Thresholds


class MinimumRule(SoftRule):
    """Warn when a numeric value is below a minimum."""

    rule_type: Literal["minimum"] = "minimum"
    minimum: float


Rule = Annotated[
    Union[StrictRule, AgeRangeRule, YearRangeRule, ThresholdRule, MinimumRule],
    Field(discriminator="rule_type"),
]

RULE_ADAPTER: TypeAdapter = TypeAdapter(Rule)

SOFT_RULE_TYPES = ("age_range", "year_range", "threshold", "minimum")
RULE_TYPES = ("strict",) + SOFT_RULE_TYPES


def parse_rule(data: dict[str, Any]) -> Rule:
    """
    Build a typed rule from its dictionary form.

    Raises:
        pydantic.ValidationError: If the definition does not match any rule kind
    """
    return RULE_ADAPTER.validate_python(data)
