"""
Rule engine for evaluating form fields against a rule set.

Each rule kind is expanded into an ordered list of validators through a
registry keyed by ``rule_type``. Evaluating a field runs its validators in
order; the first failure becomes an error (strict rules) or a warning
(soft rules).
"""

from collections.abc import Callable
from typing import Any

from admitguard.core.errors import RuleConfigError
from admitguard.core.models import (
    AgeRangeRule,
    EvaluationContext,
    FieldOutcome,
    MinimumRule,
    Rule,
    RuleSet,
    StrictRule,
    ThresholdRule,
    YearRangeRule,
)
from admitguard.core.validators import (
    AgeRangeValidator,
    BaseValidator,
    DependencyValidator,
    ForbiddenValueValidator,
    MinLengthValidator,
    RangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    ThresholdValidator,
    ValidationError,
)


def _strict_validators(field_name: str, rule: StrictRule) -> list[BaseValidator]:
    validators: list[BaseValidator] = []

    if rule.required:
        validators.append(RequiredFieldValidator(
            field_name, {"message": rule.required_message or rule.error_message}
        ))
    if rule.min_length is not None:
        validators.append(MinLengthValidator(
            field_name, {"min_length": rule.min_length, "message": rule.error_message}
        ))
    if rule.pattern:
        validators.append(RegexValidator(
            field_name, {"pattern": rule.pattern, "message": rule.error_message}
        ))
    if rule.forbidden_value is not None:
        validators.append(ForbiddenValueValidator(
            field_name,
            {
                "forbidden_value": rule.forbidden_value,
                "message": rule.forbidden_message or rule.error_message,
            },
        ))
    if rule.dependency is not None:
        validators.append(DependencyValidator(
            field_name,
            {
                "on_field": rule.dependency.on_field,
                "allowed_values": rule.dependency.allowed_values,
                "message": rule.error_message,
            },
        ))

    return validators


def _age_range_validators(field_name: str, rule: AgeRangeRule) -> list[BaseValidator]:
    min_age, max_age = rule.age_range
    return [AgeRangeValidator(field_name, {
        "min_age": min_age,
        "max_age": max_age,
        "reference_date": rule.reference_date,
        "message": rule.error_message,
    })]


def _year_range_validators(field_name: str, rule: YearRangeRule) -> list[BaseValidator]:
    min_year, max_year = rule.year_range
    return [RangeValidator(field_name, {
        "min": min_year,
        "max": max_year,
        "parse": "int",
        "message": rule.error_message,
    })]


def _threshold_validators(field_name: str, rule: ThresholdRule) -> list[BaseValidator]:
    return [ThresholdValidator(field_name, {
        "percentage": rule.thresholds.percentage,
        "cgpa": rule.thresholds.cgpa,
        "message": rule.error_message,
    })]


def _minimum_validators(field_name: str, rule: MinimumRule) -> list[BaseValidator]:
    return [RangeValidator(field_name, {
        "min": rule.minimum,
        "parse": "int",
        "message": rule.error_message,
    })]


VALIDATOR_REGISTRY: dict[str, Callable[[str, Any], list[BaseValidator]]] = {
    "strict": _strict_validators,
    "age_range": _age_range_validators,
    "year_range": _year_range_validators,
    "threshold": _threshold_validators,
    "minimum": _minimum_validators,
}


def build_validators(field_name: str, rule: Rule) -> list[BaseValidator]:
    """
    Expand one rule into its ordered validators.

    Raises:
        RuleConfigError: If the rule type is not registered or a validator cannot be built
    """
    factory = VALIDATOR_REGISTRY.get(rule.rule_type)
    if factory is None:
        raise RuleConfigError(f"Unknown rule type: {rule.rule_type}")

    try:
        return factory(field_name, rule)
    except ValueError as e:
        raise RuleConfigError(f"Failed to create validators for field '{field_name}': {e}")


def run_validators(
    field_name: str,
    rule: Rule,
    validators: list[BaseValidator],
    value: Any,
    record: dict[str, Any],
    context: EvaluationContext,
) -> FieldOutcome:
    """Run validators in order and convert the first failure into an outcome."""
    for validator in validators:
        try:
            validator.validate(value, record, context)
        except ValidationError as e:
            return FieldOutcome(
                field_name=field_name,
                status=rule.severity,
                message=e.message,
                check=e.rule_name,
            )
    return FieldOutcome.ok(field_name)


def evaluate(
    field_name: str,
    rule: Rule,
    value: Any,
    context_values: dict[str, Any] | None = None,
    context: EvaluationContext | None = None,
) -> FieldOutcome:
    """
    Evaluate a single rule against a single value.

    Args:
        field_name: Field being evaluated
        rule: Rule governing the field
        value: Raw field value
        context_values: Other form values (for dependency checks)
        context: Evaluation toggles (CGPA mode)

    Returns:
        FieldOutcome with status "ok", "error" or "warning"
    """
    return run_validators(
        field_name,
        rule,
        build_validators(field_name, rule),
        value,
        context_values or {},
        context or EvaluationContext(),
    )


class RuleEngine:
    """
    Evaluates every field of a form against a RuleSet.

    Validators are built once per engine; an engine is tied to exactly one
    rule-set version.
    """

    def __init__(self, rule_set: RuleSet):
        """
        Initialize the rule engine with a rule set.

        Args:
            rule_set: Versioned rule configuration

        Raises:
            RuleConfigError: If any rule cannot be turned into validators
        """
        self.rule_set = rule_set
        self.validators: dict[str, list[BaseValidator]] = {}
        self._build_validators()

    def _build_validators(self) -> None:
        for field_name, rule in self.rule_set.rules.items():
            self.validators[field_name] = build_validators(field_name, rule)

    @property
    def version(self) -> int:
        return self.rule_set.version

    def evaluate_field(
        self,
        field_name: str,
        values: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> FieldOutcome:
        """Evaluate one declared field using the full form as context."""
        rule = self.rule_set.get_rule(field_name)
        return run_validators(
            field_name,
            rule,
            self.validators[field_name],
            values.get(field_name),
            values,
            context or EvaluationContext(),
        )

    def evaluate_form(
        self,
        values: dict[str, Any],
        context: EvaluationContext | None = None,
    ) -> dict[str, FieldOutcome]:
        """
        Evaluate every declared field.

        Returns:
            Mapping of field name to outcome, in rule-set order
        """
        context = context or EvaluationContext()
        return {
            field_name: self.evaluate_field(field_name, values, context)
            for field_name in self.rule_set.rules
        }

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts by type and severity
        """
        return {
            "version": self.rule_set.version,
            "total_rules": len(self.rule_set.rules),
            "total_checks": sum(len(v) for v in self.validators.values()),
            "rules_by_type": self._count_by_type(),
            "rules_by_severity": self._count_by_severity(),
        }

    def _count_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for rule in self.rule_set.rules.values():
            counts[rule.rule_type] = counts.get(rule.rule_type, 0) + 1
        return counts

    def _count_by_severity(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for rule in self.rule_set.rules.values():
            counts[rule.severity] = counts.get(rule.severity, 0) + 1
        return counts
