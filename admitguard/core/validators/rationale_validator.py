"""
RationaleValidator - checks free-text justifications for exception requests.
"""

from admitguard.core.models import RationaleOutcome
from admitguard.core.models.rule_set import DEFAULT_RATIONALE_KEYWORDS, ExceptionPolicy

from .base_validator import ValidationError


class RationaleValidator:
    """
    Validates an exception rationale against length and keyword constraints.

    Checks run in order and only the first failure is reported:
    1. too_short: fewer than ``min_length`` characters
    2. missing_keyword: none of ``keywords`` appears (case-insensitive)

    An empty keyword list disables the keyword check.
    """

    def __init__(self, min_length: int = 30, keywords: list[str] | None = None):
        self.min_length = min_length
        self.keywords = [k.lower() for k in (DEFAULT_RATIONALE_KEYWORDS if keywords is None else keywords)]

    @classmethod
    def from_policy(cls, policy: ExceptionPolicy) -> "RationaleValidator":
        return cls(min_length=policy.min_rationale_length, keywords=policy.keywords)

    @property
    def too_short_message(self) -> str:
        return f"Rationale must be at least {self.min_length} characters."

    @property
    def missing_keyword_message(self) -> str:
        examples = ", ".join(f"'{k}'" for k in self.keywords[:2])
        return f"Rationale must include a valid keyword (e.g., {examples})."

    def validate(self, text: str, field_name: str = "rationale") -> None:
        """
        Raises:
            ValidationError: rule_name is "too_short" or "missing_keyword"
        """
        text = text or ""

        if len(text) < self.min_length:
            raise ValidationError("too_short", field_name, self.too_short_message)

        if self.keywords:
            lowered = text.lower()
            if not any(keyword in lowered for keyword in self.keywords):
                raise ValidationError("missing_keyword", field_name, self.missing_keyword_message)

    def check(self, text: str) -> RationaleOutcome:
        """Validate without raising, returning the outcome as data."""
        try:
            self.validate(text)
        except ValidationError as e:
            return RationaleOutcome(status=e.rule_name, message=e.message)
        return RationaleOutcome()


def validate_rationale(text: str, policy: ExceptionPolicy | None = None) -> RationaleOutcome:
    """
    Check a rationale using the given policy (defaults: 30 characters, standard keywords).

    Examples:
        >>> validate_rationale("short").status
        'too_short'
        >>> validate_rationale("This is a special case for the committee").status
        'ok'
    """
    validator = RationaleValidator.from_policy(policy or ExceptionPolicy())
    return validator.check(text)
