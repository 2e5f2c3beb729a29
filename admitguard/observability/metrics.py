"""
Prometheus metrics collection for admitguard

This module provides metrics instrumentation for monitoring intake
submissions, validation outcomes and exception usage.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# SUBMISSION METRICS
# =======================

submissions_total = Counter(
    name="admitguard_submissions_total",
    documentation="Total number of accepted intake submissions",
    labelnames=["flagged"],  # flagged: true, false
    registry=REGISTRY,
)

submission_rejections_total = Counter(
    name="admitguard_submission_rejections_total",
    documentation="Submit attempts refused because the form was not valid",
    registry=REGISTRY,
)

# =======================
# VALIDATION METRICS
# =======================

field_errors_total = Counter(
    name="admitguard_field_errors_total",
    documentation="Strict-rule errors present at refused submit attempts",
    labelnames=["field_name"],
    registry=REGISTRY,
)

field_warnings_total = Counter(
    name="admitguard_field_warnings_total",
    documentation="Soft-rule warnings present at refused submit attempts",
    labelnames=["field_name"],
    registry=REGISTRY,
)

exceptions_granted_total = Counter(
    name="admitguard_exceptions_granted_total",
    documentation="Exceptions (waivers) recorded on accepted submissions",
    labelnames=["field_name"],
    registry=REGISTRY,
)

# =======================
# STATE GAUGES
# =======================

audit_log_size = Gauge(
    name="admitguard_audit_log_size",
    documentation="Current number of submissions in the audit log",
    registry=REGISTRY,
)

rule_set_version = Gauge(
    name="admitguard_rule_set_version",
    documentation="Version of the active rule set",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def set_gauge(gauge: Gauge, value: float, **labels) -> None:
    """
    Set a gauge metric value

    Args:
        gauge: Prometheus Gauge metric
        value: Value to set
        **labels: Label values for the metric
    """
    if labels:
        gauge.labels(**labels).set(value)
    else:
        gauge.set(value)


# =======================
# INTAKE HELPERS
# =======================

def record_submission(flagged: bool, exception_fields: list[str]) -> None:
    """
    Record an accepted submission.

    Args:
        flagged: Whether the submission was flagged for review
        exception_fields: Fields with an active exception
    """
    increment_counter(submissions_total, 1, flagged=str(flagged).lower())
    for field_name in exception_fields:
        increment_counter(exceptions_granted_total, 1, field_name=field_name)


def record_rejection(errors: dict[str, str], warnings: dict[str, str]) -> None:
    """
    Record a refused submit attempt with the fields that blocked it.

    Args:
        errors: Strict-rule errors, field -> message
        warnings: Soft-rule warnings, field -> message
    """
    increment_counter(submission_rejections_total)
    for field_name in errors:
        increment_counter(field_errors_total, 1, field_name=field_name)
    for field_name in warnings:
        increment_counter(field_warnings_total, 1, field_name=field_name)
