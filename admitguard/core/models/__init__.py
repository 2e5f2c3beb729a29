"""
Core data models for the admission intake validation engine.

All models use Pydantic for runtime validation and type safety.
"""

from .intake_form import EvaluationContext, ExceptionRequest, ExceptionState, FormValues
from .outcome import FieldOutcome, FieldStatus, RationaleOutcome
from .rule import (
    AgeRangeRule,
    Dependency,
    MinimumRule,
    Rule,
    StrictRule,
    ThresholdRule,
    Thresholds,
    YearRangeRule,
    parse_rule,
)
from .rule_set import ExceptionPolicy, RuleSet
from .submission import SubmissionRecord
from .validation_state import ValidationState

__all__ = [
    "Rule",
    "StrictRule",
    "AgeRangeRule",
    "YearRangeRule",
    "ThresholdRule",
    "Thresholds",
    "MinimumRule",
    "Dependency",
    "parse_rule",
    "RuleSet",
    "ExceptionPolicy",
    "FormValues",
    "ExceptionRequest",
    "ExceptionState",
    "EvaluationContext",
    "FieldOutcome",
    "FieldStatus",
    "RationaleOutcome",
    "ValidationState",
    "SubmissionRecord",
]
