"""
Validation orchestration for the intake form.

Coordinates one recomputation: evaluate rules → partition outcomes →
check exception rationales → count active exceptions → derive validity.

``recompute`` is a pure function of its inputs. It performs no I/O (no
logging, no metrics) so it is safe to call on every keystroke, and it never
raises for user input: every problem is reported as a message in the
returned ValidationState.
"""

from collections.abc import Mapping
from typing import Any

from admitguard.core.models import (
    EvaluationContext,
    ExceptionRequest,
    FieldStatus,
    RuleSet,
    ValidationState,
)
from admitguard.core.rules import RuleEngine
from admitguard.core.validators import RationaleValidator
from admitguard.utils.validation import is_empty

_NO_EXCEPTION = ExceptionRequest()


def recompute(
    form_values: Mapping[str, Any],
    exception_state: Mapping[str, ExceptionRequest],
    rule_set: RuleSet,
    context: EvaluationContext | None = None,
) -> ValidationState:
    """
    Recompute the full validation state of a form.

    Args:
        form_values: Field name -> raw value (str, or bool for toggles)
        exception_state: Field name -> exception request
        rule_set: Versioned rule configuration
        context: Evaluation toggles (CGPA mode)

    Returns:
        A complete ValidationState
    """
    return ValidationOrchestrator(rule_set).recompute(form_values, exception_state, context)


class ValidationOrchestrator:
    """
    Runs the rule engine over every field and aggregates the result.

    Flow:
    1. Evaluate every field; partition outcomes into errors and warnings
    2. For each warned field with a requested exception, validate the rationale
    3. Count valid exceptions; flag when the count exceeds the policy threshold
    4. Form is valid when there are no errors, every required field is filled
       and every warning is resolved
    """

    def __init__(self, rule_set: RuleSet):
        """
        Args:
            rule_set: Versioned rule configuration
        """
        self.rule_set = rule_set
        self.engine = RuleEngine(rule_set)
        self.rationale_validator = RationaleValidator.from_policy(rule_set.exception_policy)

    def recompute(
        self,
        form_values: Mapping[str, Any],
        exception_state: Mapping[str, ExceptionRequest],
        context: EvaluationContext | None = None,
    ) -> ValidationState:
        values = dict(form_values)
        outcomes = self.engine.evaluate_form(values, context or EvaluationContext())

        errors: dict[str, str] = {}
        warnings: dict[str, str] = {}
        for field_name, outcome in outcomes.items():
            if outcome.status == "error":
                errors[field_name] = outcome.message
            elif outcome.status == "warning":
                warnings[field_name] = outcome.message

        rationale_errors: dict[str, str] = {}
        active_exceptions: list[str] = []
        unresolved: list[str] = []
        for field_name in warnings:
            request = exception_state.get(field_name, _NO_EXCEPTION)
            rule = self.rule_set.rules[field_name]

            if not request.requested or not rule.exception_allowed:
                unresolved.append(field_name)
                continue

            result = self.rationale_validator.check(request.rationale)
            if not result.is_ok:
                rationale_errors[field_name] = result.message
                unresolved.append(field_name)
            elif request.rationale:
                active_exceptions.append(field_name)

        all_required_filled = all(
            not is_empty(values.get(field_name))
            for field_name in self.rule_set.required_fields
        )

        count = len(active_exceptions)
        return ValidationState(
            errors=errors,
            warnings=warnings,
            rationale_errors=rationale_errors,
            active_exceptions=active_exceptions,
            unresolved_warnings=unresolved,
            active_exception_count=count,
            flagged=count > self.rule_set.exception_policy.flag_threshold,
            is_valid=not errors and all_required_filled and not unresolved,
            rule_set_version=self.rule_set.version,
        )


def classify_field(
    field_name: str,
    form_values: Mapping[str, Any],
    state: ValidationState,
) -> FieldStatus:
    """
    Map the derived state of one field to a display category.

    Returns:
        "error", "warning" (unresolved warning), "valid" (resolved warning or
        filled without issues) or "idle" (empty, untouched)
    """
    if field_name in state.errors:
        return "error"

    if field_name in state.warnings:
        if field_name in state.unresolved_warnings:
            return "warning"
        return "valid"

    value = form_values.get(field_name)
    if isinstance(value, bool):
        return "valid" if value else "idle"
    if not is_empty(value):
        return "valid"
    return "idle"
