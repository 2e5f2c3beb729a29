"""
Admin CLI for the admission intake engine.

Usage:
    python -m admitguard.cli.admin_cli validate --form <path> [--cgpa]
    python -m admitguard.cli.admin_cli submit --form <path> [--cgpa]
    python -m admitguard.cli.admin_cli logs [--limit N] [--offset N] [--flagged-only]
    python -m admitguard.cli.admin_cli show-log --id <submission_id>
    python -m admitguard.cli.admin_cli audit-report
    python -m admitguard.cli.admin_cli clear-logs --yes
    python -m admitguard.cli.admin_cli show-rules
    python -m admitguard.cli.admin_cli set-rule --field <name> --attribute <attr> --value <yaml>
    python -m admitguard.cli.admin_cli reset-rules

A form file is YAML or JSON:

    values:
      full_name: Asha Verma
      phone: "9876543210"
      ...
    exceptions:
      dob: "Special case approved by the admissions committee"
    is_cgpa: false
    offer_sent: true
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from admitguard.core.errors import AdmitGuardError, SubmissionRejectedError
from admitguard.core.models import RuleSet, ValidationState
from admitguard.core.rules import RuleEngine, RuleStore
from admitguard.intake import IntakeSession
from admitguard.intake.session import OFFER_SENT_FIELD
from admitguard.observability.logger import get_logger
from admitguard.storage.audit import SubmissionRecorder
from admitguard.storage.kv_store import KeyValueStore, open_store
from admitguard.utils.validation import validate_file_path

logger = get_logger(__name__)

EXIT_INVALID_FORM = 2


def _parse_flag(raw: Any, name: str) -> bool:
    """Resolve a text scalar (true/false/yes/no/on/off) to a boolean."""
    if raw is None or raw == "":
        return False
    flag = yaml.safe_load(raw) if isinstance(raw, str) else raw
    if not isinstance(flag, bool):
        raise AdmitGuardError(f"'{name}' must be true or false, got {raw!r}")
    return flag


def load_form_file(path: str) -> dict[str, Any]:
    """
    Read a form file (YAML or JSON; JSON is valid YAML).

    Scalars are read as text, so digit strings such as an Aadhaar number
    with a leading zero keep their exact characters. Only ``is_cgpa`` and
    ``offer_sent`` are resolved to booleans.

    Returns:
        Dictionary with keys: values, exceptions, is_cgpa, offer_sent

    Raises:
        AdmitGuardError: If the file is missing or malformed
    """
    form_path = Path(validate_file_path(path, "form"))
    if not form_path.exists():
        raise AdmitGuardError(f"Form file not found: {path}")

    with open(form_path, encoding="utf-8") as f:
        try:
            data = yaml.load(f, Loader=yaml.BaseLoader) or {}
        except yaml.YAMLError as e:
            raise AdmitGuardError(f"Invalid form file {path}: {e}") from e

    if not isinstance(data, dict):
        raise AdmitGuardError(f"Form file {path} must contain a mapping")

    values = data.get("values") or {}
    exceptions = data.get("exceptions") or {}
    if not isinstance(values, dict) or not isinstance(exceptions, dict):
        raise AdmitGuardError("'values' and 'exceptions' must be mappings")

    for name, value in {**values, **exceptions}.items():
        if not isinstance(value, str):
            raise AdmitGuardError(f"Form entry '{name}' must be a single value")

    offer_sent = data.get("offer_sent", values.pop(OFFER_SENT_FIELD, None))

    return {
        "values": values,
        "exceptions": exceptions,
        "is_cgpa": _parse_flag(data.get("is_cgpa"), "is_cgpa"),
        "offer_sent": _parse_flag(offer_sent, "offer_sent"),
    }


def build_session(form: dict[str, Any], rule_set: RuleSet, is_cgpa: bool = False) -> IntakeSession:
    """Create a session populated from a loaded form file."""
    session = IntakeSession(rule_set, is_cgpa=is_cgpa or form["is_cgpa"])
    values = {k: v for k, v in form["values"].items() if k != OFFER_SENT_FIELD}
    session.update(values)
    if OFFER_SENT_FIELD in rule_set.rules:
        session.set_offer_sent(form["offer_sent"])
    for field_name, rationale in form["exceptions"].items():
        session.request_exception(field_name, rationale)
    return session


def print_state(state: ValidationState) -> None:
    """Print a validation state as a report."""
    print(f"\n{'=' * 70}")
    print("VALIDATION RESULT")
    print(f"{'=' * 70}\n")

    sections = [
        ("Errors", state.errors),
        ("Warnings", state.warnings),
        ("Rationale errors", state.rationale_errors),
    ]
    for title, messages in sections:
        print(f"{title}:")
        if not messages:
            print("  (none)")
        for field_name, message in messages.items():
            print(f"  {field_name:<18} {message}")
        print()

    print(f"Active exceptions: {state.active_exception_count}"
          f"{' (' + ', '.join(state.active_exceptions) + ')' if state.active_exceptions else ''}")
    print(f"Flagged for review: {'yes' if state.flagged else 'no'}")
    print(f"Ready to submit:    {'yes' if state.is_valid else 'no'}")
    print(f"\n{'=' * 70}\n")


def _store(args) -> KeyValueStore:
    return open_store(args.store)


def validate_command(args) -> int:
    """
    Validate a form file without recording it.

    Returns:
        0 if the form could be submitted, 2 otherwise
    """
    form = load_form_file(args.form)
    rule_set = RuleStore(_store(args)).current()
    session = build_session(form, rule_set, is_cgpa=args.cgpa)

    if args.json:
        print(json.dumps(session.state.model_dump(), indent=2))
    else:
        print_state(session.state)

    return 0 if session.state.is_valid else EXIT_INVALID_FORM


def submit_command(args) -> int:
    """Validate a form file and append it to the audit log."""
    store = _store(args)
    form = load_form_file(args.form)
    session = build_session(form, RuleStore(store).current(), is_cgpa=args.cgpa)

    try:
        submission = session.submit(SubmissionRecorder(store))
    except SubmissionRejectedError as e:
        print("\nSubmission rejected. Fix all errors and provide valid rationales for warnings.")
        print_state(e.state)
        return EXIT_INVALID_FORM

    print(f"\nForm submitted successfully! Submission id: {submission.id}")
    if submission.flagged:
        print("Entry has been flagged for manager review.")
    return 0


def logs_command(args) -> int:
    """List recorded submissions, newest first."""
    recorder = SubmissionRecorder(_store(args))
    records = recorder.list(limit=args.limit, offset=args.offset, flagged_only=args.flagged_only)

    if not records:
        print("\nNo submissions found.")
        print("Submitted applications will appear here for audit review.")
        return 0

    print(f"\n{'=' * 100}")
    print(f"AUDIT LOG{' - flagged only' if args.flagged_only else ''}")
    print(f"{'=' * 100}\n")
    print(f"{'ID':<15} {'Timestamp':<20} {'Candidate':<25} {'Status':<12} {'Exceptions':<11} {'Flagged'}")
    print(f"{'-' * 100}")
    for record in records:
        print(
            f"{record.id:<15} {record.timestamp:<20} {record.full_name[:24]:<25} "
            f"{record.status:<12} {record.exception_count:<11} {'YES' if record.flagged else 'no'}"
        )
    print(f"\n{'=' * 100}\n")
    return 0


def show_log_command(args) -> int:
    """Show one submission in detail."""
    record = SubmissionRecorder(_store(args)).get(args.id)

    if args.json:
        print(json.dumps(record.to_record(), indent=2))
        return 0

    print(f"\n{'=' * 70}")
    print(f"SUBMISSION {record.id}")
    print(f"{'=' * 70}\n")
    for key, value in record.to_record().items():
        if key in ("exceptions", "id"):
            continue
        print(f"  {key:<16} {value}")

    if record.exception_count:
        print(f"\nActive Exceptions ({record.exception_count}):")
        for field_name, rationale in record.exceptions.items():
            print(f"  {field_name}: {rationale}")

    if record.flagged:
        print("\nFLAGGED: this candidate exceeded the exception threshold and "
              "requires manual verification.")
    print(f"\n{'=' * 70}\n")
    return 0


def audit_report_command(args) -> int:
    """Print audit log statistics."""
    summary = SubmissionRecorder(_store(args)).summary()

    print(f"\n{'=' * 60}")
    print("AUDIT REPORT")
    print(f"{'=' * 60}\n")

    print("Overall Statistics:")
    print(f"  Total submissions: {summary['total_submissions']}")
    print(f"  Flagged for review: {summary['flagged_submissions']}")
    print(f"  Total exceptions: {summary['total_exceptions']}")
    if summary["latest_timestamp"]:
        print(f"  Latest submission: {summary['latest_timestamp']}")

    print("\nExceptions by Field:")
    for field_name, count in sorted(
        summary["exceptions_by_field"].items(),
        key=lambda x: x[1],
        reverse=True
    ):
        print(f"  {field_name:<30} {count:>8}")

    print("\nSubmissions by Interview Status:")
    for status, count in sorted(summary["submissions_by_status"].items()):
        print(f"  {status:<30} {count:>8}")

    print(f"\n{'=' * 60}\n")
    return 0


def clear_logs_command(args) -> int:
    """Delete every submission. Requires --yes."""
    if not args.yes:
        print("\nRefusing to clear the audit log without --yes. This action cannot be undone.")
        return 1

    removed = SubmissionRecorder(_store(args)).clear()
    print(f"\nCleared {removed} submission(s) from the audit log.")
    return 0


def show_rules_command(args) -> int:
    """Print the active rule configuration as YAML."""
    rule_store = RuleStore(_store(args))
    rule_set = rule_store.current()
    summary = RuleEngine(rule_set).get_rule_summary()

    print(f"# Rule set version {rule_set.version}"
          f"{' (overridden)' if rule_store.has_overrides() else ' (defaults)'}")
    print(f"# {summary['total_rules']} rules, {summary['total_checks']} checks: "
          + ", ".join(f"{k}={v}" for k, v in sorted(summary["rules_by_type"].items())))
    print(yaml.safe_dump(rule_set.to_config(), sort_keys=False))
    return 0


def set_rule_command(args) -> int:
    """Patch one attribute of one rule. The value is parsed as YAML."""
    try:
        value = yaml.safe_load(args.value)
    except yaml.YAMLError as e:
        raise AdmitGuardError(f"Cannot parse value {args.value!r}: {e}") from e

    rule_set = RuleStore(_store(args)).patch(args.field, args.attribute, value)
    print(f"\nRule updated: {args.field}.{args.attribute} = {value!r} (version {rule_set.version})")
    return 0


def reset_rules_command(args) -> int:
    """Restore the default rules."""
    rule_set = RuleStore(_store(args)).reset()
    print(f"\nRules reset to defaults (version {rule_set.version}).")
    return 0


COMMANDS = {
    "validate": validate_command,
    "submit": submit_command,
    "logs": logs_command,
    "show-log": show_log_command,
    "audit-report": audit_report_command,
    "clear-logs": clear_logs_command,
    "show-rules": show_rules_command,
    "set-rule": set_rule_command,
    "reset-rules": reset_rules_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="admitguard",
        description="Admin CLI for the admission intake engine",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--store",
        default=None,
        help="Path to the JSON store (default: $ADMITGUARD_STORE or .admitguard.json)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a form file")
    validate_parser.add_argument("--form", required=True, help="YAML/JSON form file")
    validate_parser.add_argument("--cgpa", action="store_true", help="Score is a CGPA")
    validate_parser.add_argument("--json", action="store_true", help="Print the state as JSON")

    # submit command
    submit_parser = subparsers.add_parser("submit", help="Validate and record a form file")
    submit_parser.add_argument("--form", required=True, help="YAML/JSON form file")
    submit_parser.add_argument("--cgpa", action="store_true", help="Score is a CGPA")

    # logs command
    logs_parser = subparsers.add_parser("logs", help="List recorded submissions")
    logs_parser.add_argument(
        "--limit",
        type=int,
        default=100,
        help="Maximum number of submissions to display (default: 100)"
    )
    logs_parser.add_argument("--offset", type=int, default=0, help="Submissions to skip")
    logs_parser.add_argument(
        "--flagged-only",
        action="store_true",
        help="Only show submissions flagged for review"
    )

    # show-log command
    show_parser = subparsers.add_parser("show-log", help="Show one submission")
    show_parser.add_argument("--id", type=int, required=True, help="Submission id")
    show_parser.add_argument("--json", action="store_true", help="Print the raw record")

    # audit-report command
    subparsers.add_parser("audit-report", help="Show audit log statistics")

    # clear-logs command
    clear_parser = subparsers.add_parser("clear-logs", help="Delete all submissions")
    clear_parser.add_argument("--yes", action="store_true", help="Confirm deletion")

    # rule commands
    subparsers.add_parser("show-rules", help="Print the active rules")

    set_rule_parser = subparsers.add_parser("set-rule", help="Patch one rule attribute")
    set_rule_parser.add_argument("--field", required=True, help="Field name")
    set_rule_parser.add_argument("--attribute", required=True, help="Rule attribute")
    set_rule_parser.add_argument("--value", required=True, help="New value (YAML syntax)")

    subparsers.add_parser("reset-rules", help="Restore the default rules")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for admin CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except AdmitGuardError as e:
        logger.error(f"Command {args.command} failed: {e}", exc_info=True)
        print(f"\nError: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
