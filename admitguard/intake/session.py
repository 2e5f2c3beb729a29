"""
Intake session: the stateful form controller around the pure orchestrator.

A session owns the form values, exception requests and toggles of one
candidate entry. Every edit triggers one full recomputation, so ``state``
always reflects the latest snapshot. ``submit`` snapshots a valid form into
a SubmissionRecord, hands it to the recorder and resets the form.
"""

from datetime import datetime
from typing import Any

from admitguard.core.errors import SubmissionRejectedError, UnknownFieldError
from admitguard.core.models import (
    EvaluationContext,
    ExceptionRequest,
    FieldStatus,
    RuleSet,
    StrictRule,
    SubmissionRecord,
    ValidationState,
)
from admitguard.observability.logger import get_logger, log_operation
from admitguard.observability.metrics import record_rejection, record_submission
from admitguard.storage.audit import SubmissionRecorder

from .orchestrator import ValidationOrchestrator, classify_field

logger = get_logger(__name__)

OFFER_SENT_FIELD = "offer_sent"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Record attributes computed at submit time, never copied from form values
SUBMISSION_META_FIELDS = {"id", "exceptions", "flagged", "exception_count", "is_cgpa", "timestamp"}


def _is_toggle(rule: Any) -> bool:
    # Toggle fields carry a dependency only; they are never typed text.
    return (
        isinstance(rule, StrictRule)
        and rule.dependency is not None
        and not rule.required
        and rule.pattern is None
        and rule.min_length is None
    )


class IntakeSession:
    """
    Holds one in-progress admission form and its derived validation state.

    Usage:
        session = IntakeSession(rule_set)
        session.set_value("full_name", "Asha Verma")
        session.toggle_exception("dob")
        session.set_rationale("dob", "Special case approved by the dean's office")
        if session.state.is_valid:
            record = session.submit(recorder)
    """

    def __init__(self, rule_set: RuleSet, is_cgpa: bool = False):
        """
        Args:
            rule_set: Rule configuration used for every recomputation
            is_cgpa: Scores are entered as CGPA rather than percentage
        """
        self.is_cgpa = is_cgpa
        self._apply_rule_set(rule_set)
        self.reset()

    def _apply_rule_set(self, rule_set: RuleSet) -> None:
        self.rule_set = rule_set
        self.orchestrator = ValidationOrchestrator(rule_set)
        self.toggle_fields = {
            name for name, rule in rule_set.rules.items() if _is_toggle(rule)
        }

    def _empty_value(self, field_name: str) -> Any:
        return False if field_name in self.toggle_fields else ""

    # =======================
    # EDITING
    # =======================

    def reset(self) -> ValidationState:
        """Clear values, exception requests and rationales. The CGPA toggle is kept."""
        self.values: dict[str, Any] = {
            field_name: self._empty_value(field_name) for field_name in self.rule_set.fields
        }
        self.exceptions: dict[str, ExceptionRequest] = {}
        return self._recompute()

    def set_value(self, field_name: str, value: Any) -> ValidationState:
        """
        Set one field value.

        Raises:
            UnknownFieldError: If the field is not declared in the rule set
        """
        if field_name not in self.values:
            raise UnknownFieldError(field_name)
        self.values[field_name] = value
        return self._recompute()

    def update(self, values: dict[str, Any]) -> ValidationState:
        """Set several field values with a single recomputation."""
        unknown = [name for name in values if name not in self.values]
        if unknown:
            raise UnknownFieldError(unknown[0])
        self.values.update(values)
        return self._recompute()

    def set_offer_sent(self, offer_sent: bool) -> ValidationState:
        return self.set_value(OFFER_SENT_FIELD, bool(offer_sent))

    def set_cgpa(self, is_cgpa: bool) -> ValidationState:
        self.is_cgpa = bool(is_cgpa)
        return self._recompute()

    def toggle_exception(self, field_name: str) -> ValidationState:
        """Flip the exception request of a field, keeping any rationale already typed."""
        self.rule_set.get_rule(field_name)
        current = self.exceptions.get(field_name, ExceptionRequest())
        self.exceptions[field_name] = current.model_copy(update={"requested": not current.requested})
        return self._recompute()

    def set_rationale(self, field_name: str, rationale: str) -> ValidationState:
        self.rule_set.get_rule(field_name)
        current = self.exceptions.get(field_name, ExceptionRequest())
        self.exceptions[field_name] = current.model_copy(update={"rationale": rationale or ""})
        return self._recompute()

    def request_exception(self, field_name: str, rationale: str) -> ValidationState:
        """Request an exception with its rationale in one step."""
        self.rule_set.get_rule(field_name)
        self.exceptions[field_name] = ExceptionRequest(requested=True, rationale=rationale or "")
        return self._recompute()

    def replace_rule_set(self, rule_set: RuleSet) -> ValidationState:
        """Swap in an edited rule set; values for fields it no longer declares are dropped."""
        old_values = self.values
        self._apply_rule_set(rule_set)
        self.values = {
            field_name: old_values.get(field_name, self._empty_value(field_name))
            for field_name in rule_set.fields
        }
        self.exceptions = {k: v for k, v in self.exceptions.items() if k in rule_set.rules}
        return self._recompute()

    # =======================
    # DERIVED STATE
    # =======================

    @property
    def context(self) -> EvaluationContext:
        return EvaluationContext(is_cgpa=self.is_cgpa)

    def _recompute(self) -> ValidationState:
        self.state = self.orchestrator.recompute(self.values, self.exceptions, self.context)
        return self.state

    def field_status(self, field_name: str) -> FieldStatus:
        if field_name not in self.values:
            raise UnknownFieldError(field_name)
        return classify_field(field_name, self.values, self.state)

    # =======================
    # SUBMISSION
    # =======================

    def build_submission(self, submission_id: int, timestamp: str | None = None) -> SubmissionRecord:
        """
        Snapshot the current form into a SubmissionRecord.

        Only exceptions that are active (valid rationale on a warned field)
        are included.
        """
        state = self.state
        snapshot = {
            name: value if isinstance(value, bool) else ("" if value is None else str(value))
            for name, value in self.values.items()
            if name in SubmissionRecord.model_fields and name not in SUBMISSION_META_FIELDS
        }
        exceptions = {
            field_name: self.exceptions[field_name].rationale
            for field_name in state.active_exceptions
        }
        return SubmissionRecord(
            **snapshot,
            id=submission_id,
            exceptions=exceptions,
            flagged=state.flagged,
            exception_count=state.active_exception_count,
            is_cgpa=self.is_cgpa,
            timestamp=timestamp or datetime.now().strftime(TIMESTAMP_FORMAT),
        )

    def submit(self, recorder: SubmissionRecorder) -> SubmissionRecord:
        """
        Record the current form and reset it.

        Args:
            recorder: Audit log collaborator

        Returns:
            The recorded SubmissionRecord

        Raises:
            SubmissionRejectedError: If the form is not valid
        """
        state = self._recompute()
        if not state.is_valid:
            record_rejection(state.errors, state.warnings)
            logger.warning(
                "Submission rejected",
                extra={
                    "error_fields": sorted(state.errors),
                    "unresolved_fields": state.unresolved_warnings,
                },
            )
            raise SubmissionRejectedError(state)

        with log_operation(
            "Submitting intake form",
            logger=logger,
            exception_count=state.active_exception_count,
            flagged=state.flagged,
        ):
            submission = self.build_submission(recorder.next_id())
            recorder.record(submission)

        record_submission(submission.flagged, list(submission.exceptions))
        if submission.flagged:
            logger.info(
                "Submission flagged for manager review",
                extra={"submission_id": submission.id, "exception_count": submission.exception_count},
            )

        self.reset()
        return submission
