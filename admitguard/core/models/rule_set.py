"""
RuleSet model: the versioned, immutable rule configuration handed to the orchestrator.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from admitguard.core.errors import RuleConfigError, UnknownFieldError

from .rule import Rule, StrictRule, parse_rule

DEFAULT_RATIONALE_KEYWORDS = [
    "approved by",
    "special case",
    "documentation pending",
    "waiver granted",
]


class ExceptionPolicy(BaseModel):
    """
    Constraints on exception (waiver) rationales and the review flag.

    Attributes:
        min_rationale_length: Minimum number of characters in a rationale
        keywords: At least one must appear (case-insensitive) in a rationale
        flag_threshold: Submissions with more active exceptions than this are flagged
    """

    min_rationale_length: int = Field(30, ge=0)
    keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_RATIONALE_KEYWORDS))
    flag_threshold: int = Field(2, ge=0)

    class Config:
        frozen = True


class RuleSet(BaseModel):
    """
    Immutable rule configuration, one rule per declared form field.

    Every edit produces a new RuleSet with an incremented version, so a
    recomputation is always tied to exactly one configuration snapshot.

    Attributes:
        version: Monotonic configuration version
        rules: Mapping of field name to rule
        exception_policy: Rationale and flagging constraints
    """

    version: int = Field(1, ge=1)
    rules: dict[str, Rule]
    exception_policy: ExceptionPolicy = Field(default_factory=ExceptionPolicy)

    class Config:
        frozen = True

    @property
    def fields(self) -> list[str]:
        """Declared field names in configuration order."""
        return list(self.rules)

    @property
    def required_fields(self) -> list[str]:
        """Fields whose strict rule marks them as required."""
        return [
            name for name, rule in self.rules.items()
            if isinstance(rule, StrictRule) and rule.required
        ]

    @property
    def soft_fields(self) -> list[str]:
        """Fields governed by an overridable rule."""
        return [name for name, rule in self.rules.items() if rule.severity == "warning"]

    def get_rule(self, field_name: str) -> Rule:
        try:
            return self.rules[field_name]
        except KeyError:
            raise UnknownFieldError(field_name) from None

    def patch(self, field_name: str, attribute: str, value: Any) -> "RuleSet":
        """
        Return a new RuleSet with one attribute of one rule replaced.

        Args:
            field_name: Field whose rule is edited
            attribute: Rule attribute to set (e.g. "min_length", "error_message")
            value: New attribute value

        Raises:
            RuleConfigError: If the field or attribute is unknown, or the
                resulting rule is invalid
        """
        if field_name not in self.rules:
            raise RuleConfigError(f"Cannot patch unknown field '{field_name}'")

        rule = self.rules[field_name]
        if attribute not in type(rule).model_fields:
            raise RuleConfigError(
                f"Rule for '{field_name}' ({rule.rule_type}) has no attribute '{attribute}'"
            )

        data = rule.model_dump()
        data[attribute] = value
        try:
            patched = parse_rule(data)
        except ValidationError as e:
            raise RuleConfigError(f"Invalid value for {field_name}.{attribute}: {e}") from e

        rules = dict(self.rules)
        rules[field_name] = patched
        return RuleSet(
            version=self.version + 1,
            rules=rules,
            exception_policy=self.exception_policy,
        )

    def replace(
        self,
        rules: dict[str, Any],
        exception_policy: ExceptionPolicy | dict[str, Any] | None = None,
    ) -> "RuleSet":
        """
        Return a new RuleSet whose rules are replaced wholesale.

        Raises:
            RuleConfigError: If any rule definition is invalid
        """
        policy = self.exception_policy if exception_policy is None else exception_policy
        try:
            return RuleSet(version=self.version + 1, rules=rules, exception_policy=policy)
        except ValidationError as e:
            raise RuleConfigError(f"Invalid rule configuration: {e}") from e

    def to_config(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        return self.model_dump(mode="json")
