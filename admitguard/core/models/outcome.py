"""
Outcome models produced by the field evaluator and the rationale validator (ephemeral).
"""

from typing import Literal

from pydantic import BaseModel

OutcomeStatus = Literal["ok", "error", "warning"]
RationaleStatus = Literal["ok", "too_short", "missing_keyword"]
FieldStatus = Literal["error", "warning", "valid", "idle"]


class FieldOutcome(BaseModel):
    """
    Result of evaluating one rule against one field value.

    Attributes:
        field_name: Field that was evaluated
        status: "ok", "error" (strict failure) or "warning" (soft failure)
        message: User-facing message, None when status is "ok"
        check: Name of the check that failed (e.g. "pattern", "age_range")
    """

    field_name: str
    status: OutcomeStatus = "ok"
    message: str | None = None
    check: str | None = None

    class Config:
        frozen = True

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def ok(cls, field_name: str) -> "FieldOutcome":
        return cls(field_name=field_name)


class RationaleOutcome(BaseModel):
    """
    Result of checking an exception rationale.

    Attributes:
        status: "ok", "too_short" or "missing_keyword"
        message: User-facing message, None when status is "ok"
    """

    status: RationaleStatus = "ok"
    message: str | None = None

    class Config:
        frozen = True

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    def __bool__(self) -> bool:
        return self.is_ok
