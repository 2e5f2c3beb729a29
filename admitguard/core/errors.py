"""
Exception hierarchy for AdmitGuard.

Validation failures on candidate data are never raised to callers; they are
reported as messages inside a ValidationState. The exceptions here cover
configuration mistakes, programming errors and storage problems.
"""

from typing import Any


class AdmitGuardError(Exception):
    """Base class for all AdmitGuard errors."""
    pass


class RuleConfigError(AdmitGuardError, ValueError):
    """Raised when a rule definition or rule patch is invalid."""
    pass


class UnknownFieldError(AdmitGuardError, KeyError):
    """Raised when a field name is not declared in the active rule set."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(field_name)

    def __str__(self) -> str:
        return f"Unknown field: {self.field_name}"


class SubmissionRejectedError(AdmitGuardError):
    """Raised when submit is attempted while the form is not valid."""

    def __init__(self, state: Any):
        self.state = state
        problems = len(state.errors) + len(state.unresolved_warnings)
        super().__init__(f"Submission rejected: form has {problems} unresolved issue(s)")


class SubmissionNotFoundError(AdmitGuardError, LookupError):
    """Raised when a submission id is not present in the audit log."""

    def __init__(self, submission_id: int):
        self.submission_id = submission_id
        super().__init__(f"No submission found with id {submission_id}")


class StorageError(AdmitGuardError):
    """Raised when persisted state cannot be read or written."""
    pass


class InputValidationError(AdmitGuardError, ValueError):
    """Raised when a caller-supplied argument (limit, offset, path) is invalid."""
    pass
