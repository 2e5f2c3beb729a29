"""
Audit log operations for accepted intake submissions.

This module provides functions to insert, query, summarize and clear
submission records, plus the SubmissionRecorder collaborator used by an
intake session. Records are kept newest first under a single store key.
"""

import time
from typing import Any

from pydantic import ValidationError

from admitguard.core.errors import StorageError, SubmissionNotFoundError
from admitguard.core.models import SubmissionRecord
from admitguard.observability.logger import get_logger
from admitguard.observability.metrics import audit_log_size, set_gauge
from admitguard.utils.validation import validate_limit, validate_offset

from .kv_store import LOGS_KEY, KeyValueStore

logger = get_logger(__name__)


def _load_records(store: KeyValueStore) -> list[dict[str, Any]]:
    records = store.get(LOGS_KEY, [])
    if not isinstance(records, list):
        raise StorageError(f"'{LOGS_KEY}' must hold a list, found {type(records).__name__}")
    return records


def _parse(raw: dict[str, Any]) -> SubmissionRecord:
    try:
        return SubmissionRecord.model_validate(raw)
    except ValidationError as e:
        raise StorageError(f"Corrupt submission record in audit log: {e}") from e


def insert_submission(store: KeyValueStore, submission: SubmissionRecord) -> int:
    """
    Prepend a submission to the audit log.

    Args:
        store: Key-value store holding the audit log
        submission: Accepted submission snapshot

    Returns:
        id: The submission id

    Raises:
        StorageError: If the id already exists or the store cannot be written
    """
    records = _load_records(store)
    if any(r.get("id") == submission.id for r in records):
        raise StorageError(f"Submission id {submission.id} already exists in audit log")

    records.insert(0, submission.to_record())
    store.set(LOGS_KEY, records)
    set_gauge(audit_log_size, len(records))

    logger.info(
        f"Recorded submission: id={submission.id}",
        extra={
            "submission_id": submission.id,
            "email": submission.email,
            "flagged": submission.flagged,
            "exception_count": submission.exception_count,
        },
    )
    return submission.id


def query_submissions(
    store: KeyValueStore,
    limit: int = 100,
    offset: int = 0,
    flagged_only: bool = False,
) -> list[SubmissionRecord]:
    """
    Query submissions, newest first.

    Args:
        store: Key-value store holding the audit log
        limit: Maximum number of records to return
        offset: Number of records to skip
        flagged_only: Only return submissions flagged for review

    Returns:
        List of SubmissionRecord
    """
    limit = validate_limit(limit)
    offset = validate_offset(offset)

    records = [_parse(r) for r in _load_records(store)]
    if flagged_only:
        records = [r for r in records if r.flagged]

    result = records[offset:offset + limit]
    logger.debug(f"Queried {len(result)} submissions", extra={"flagged_only": flagged_only})
    return result


def get_submission(store: KeyValueStore, submission_id: int) -> SubmissionRecord:
    """
    Fetch one submission by id.

    Raises:
        SubmissionNotFoundError: If no submission has this id
    """
    for raw in _load_records(store):
        if raw.get("id") == submission_id:
            return _parse(raw)
    raise SubmissionNotFoundError(submission_id)


def clear_submissions(store: KeyValueStore) -> int:
    """
    Delete every submission (bulk clear).

    Returns:
        count: Number of submissions removed
    """
    count = len(_load_records(store))
    store.delete(LOGS_KEY)
    set_gauge(audit_log_size, 0)

    logger.info(f"Cleared audit log: {count} submission(s) removed", extra={"removed": count})
    return count


def get_audit_summary(store: KeyValueStore) -> dict[str, Any]:
    """
    Summarize the audit log.

    Returns:
        Dictionary with:
        - total_submissions
        - flagged_submissions
        - total_exceptions
        - exceptions_by_field
        - submissions_by_status
        - latest_timestamp
    """
    records = [_parse(r) for r in _load_records(store)]

    exceptions_by_field: dict[str, int] = {}
    submissions_by_status: dict[str, int] = {}
    for record in records:
        for field_name in record.exceptions:
            exceptions_by_field[field_name] = exceptions_by_field.get(field_name, 0) + 1
        status = record.status or "-"
        submissions_by_status[status] = submissions_by_status.get(status, 0) + 1

    summary = {
        "total_submissions": len(records),
        "flagged_submissions": sum(1 for r in records if r.flagged),
        "total_exceptions": sum(r.exception_count for r in records),
        "exceptions_by_field": exceptions_by_field,
        "submissions_by_status": submissions_by_status,
        "latest_timestamp": records[0].timestamp if records else None,
    }
    logger.debug("Audit summary computed", extra={"total_submissions": summary["total_submissions"]})
    return summary


class SubmissionRecorder:
    """
    Persists accepted submissions for an intake session.

    Allocates ids from the wall clock in epoch milliseconds, bumped when
    needed so ids stay strictly increasing within the log.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def next_id(self) -> int:
        now_ms = int(time.time() * 1000)
        records = _load_records(self.store)
        latest = max((r.get("id", 0) for r in records), default=0)
        return max(now_ms, latest + 1)

    def record(self, submission: SubmissionRecord) -> int:
        return insert_submission(self.store, submission)

    def list(self, limit: int = 100, offset: int = 0, flagged_only: bool = False) -> list[SubmissionRecord]:
        return query_submissions(self.store, limit=limit, offset=offset, flagged_only=flagged_only)

    def get(self, submission_id: int) -> SubmissionRecord:
        return get_submission(self.store, submission_id)

    def clear(self) -> int:
        return clear_submissions(self.store)

    def summary(self) -> dict[str, Any]:
        return get_audit_summary(self.store)
