"""
ValidationState model: derived state of an intake form (ephemeral).
"""

from pydantic import BaseModel, Field, model_validator


class ValidationState(BaseModel):
    """
    Derived validation state of the whole form, recomputed on every change.

    Note: ValidationState is never persisted; it is a pure function of the
    form values, exception state, rule set and evaluation context.

    Attributes:
        errors: Strict-rule violations, field -> message
        warnings: Soft-rule violations, field -> message
        rationale_errors: Invalid rationales for requested exceptions, field -> message
        active_exceptions: Warned fields resolved by a valid rationale
        unresolved_warnings: Warned fields without a valid exception
        active_exception_count: Number of active exceptions
        flagged: More active exceptions than the rule set's flag threshold
        is_valid: Form may be submitted
        rule_set_version: Version of the rule set used for this computation
    """

    errors: dict[str, str] = Field(default_factory=dict)
    warnings: dict[str, str] = Field(default_factory=dict)
    rationale_errors: dict[str, str] = Field(default_factory=dict)
    active_exceptions: list[str] = Field(default_factory=list)
    unresolved_warnings: list[str] = Field(default_factory=list)
    active_exception_count: int = Field(0, ge=0)
    flagged: bool = False
    is_valid: bool = False
    rule_set_version: int | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "errors": {"aadhaar": "Aadhaar must be exactly 12 digits."},
                "warnings": {"dob": "Candidate age is 36. Age must be between 18 and 35"},
                "rationale_errors": {},
                "active_exceptions": ["dob"],
                "unresolved_warnings": [],
                "active_exception_count": 1,
                "flagged": False,
                "is_valid": False,
                "rule_set_version": 1,
            }
        }

    @model_validator(mode="after")
    def check_consistency(self):
        """Validate that is_valid=True implies no errors and no unresolved warnings."""
        if self.is_valid and (self.errors or self.unresolved_warnings):
            raise ValueError("is_valid=True but errors or unresolved warnings are present")
        if self.active_exception_count != len(self.active_exceptions):
            raise ValueError("active_exception_count does not match active_exceptions")
        return self

    def __bool__(self) -> bool:
        return self.is_valid
