"""
Unit tests for validation checks.

Includes property-based testing with hypothesis for validators.
"""

from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from admitguard.core.models import EvaluationContext, ExceptionPolicy
from admitguard.core.validators import (
    AgeRangeValidator,
    DependencyValidator,
    ForbiddenValueValidator,
    MinLengthValidator,
    RangeValidator,
    RationaleValidator,
    RegexValidator,
    RequiredFieldValidator,
    ThresholdValidator,
    ValidationError,
    validate_rationale,
)

REFERENCE_DATE = date(2026, 2, 25)


class TestRequiredFieldValidator:
    """Tests for RequiredFieldValidator"""

    def test_filled_value_passes(self):
        """Test validation passes for a filled field"""
        validator = RequiredFieldValidator("full_name", {"message": "Full Name is required."})
        record = {"full_name": "Asha Verma"}
        validator.validate(record["full_name"], record)  # Should not raise

    def test_empty_string_raises_error(self):
        """Test validation fails for an empty string with the configured message"""
        validator = RequiredFieldValidator("full_name", {"message": "Full Name is required."})

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("", {"full_name": ""})

        assert exc_info.value.message == "Full Name is required."
        assert exc_info.value.field_name == "full_name"
        assert exc_info.value.rule_name == "required"

    def test_none_raises_error(self):
        """Test validation fails for a missing value"""
        validator = RequiredFieldValidator("email")

        with pytest.raises(ValidationError):
            validator.validate(None, {})

    def test_false_toggle_is_filled(self):
        """Test a boolean toggle set to False is never empty"""
        validator = RequiredFieldValidator("offer_sent")
        validator.validate(False, {"offer_sent": False})  # Should not raise

    def test_whitespace_counts_as_filled(self):
        """Test whitespace-only text is accepted by the required check"""
        validator = RequiredFieldValidator("qualification")
        validator.validate("   ", {})  # Should not raise

    @given(st.text(min_size=1))
    def test_property_any_nonempty_string_passes(self, value):
        """Property test: any non-empty string passes the required check"""
        validator = RequiredFieldValidator("field")
        validator.validate(value, {"field": value})  # Should not raise


class TestMinLengthValidator:
    """Tests for MinLengthValidator"""

    def test_short_value_fails(self):
        validator = MinLengthValidator("full_name", {"min_length": 2, "message": "Too short"})

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("A", {})

        assert exc_info.value.rule_name == "min_length"
        assert exc_info.value.message == "Too short"

    def test_exact_length_passes(self):
        validator = MinLengthValidator("full_name", {"min_length": 2})
        validator.validate("Al", {})  # Should not raise

    def test_empty_value_is_skipped(self):
        """Test empty values are left to the required check"""
        validator = MinLengthValidator("full_name", {"min_length": 2})
        validator.validate("", {})  # Should not raise

    def test_missing_parameter_raises(self):
        with pytest.raises(ValueError, match="min_length"):
            MinLengthValidator("full_name")


class TestRegexValidator:
    """Tests for RegexValidator"""

    PHONE = r"^[6-9]\d{9}$"
    AADHAAR = r"^\d{12}$"

    def test_valid_phone_passes(self):
        validator = RegexValidator("phone", {"pattern": self.PHONE})
        validator.validate("9876543210", {})  # Should not raise

    @pytest.mark.parametrize("value", ["1234567890", "98765", "98765432101"])
    def test_invalid_phone_fails_with_single_message(self, value):
        """Test wrong leading digit and wrong length share one message"""
        message = "Phone must be 10 digits starting with 6, 7, 8, or 9."
        validator = RegexValidator("phone", {"pattern": self.PHONE, "message": message})

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(value, {})

        assert exc_info.value.message == message
        assert exc_info.value.rule_name == "pattern"

    @pytest.mark.parametrize("value", ["12345678901", "12345678901a"])
    def test_invalid_aadhaar_fails(self, value):
        validator = RegexValidator("aadhaar", {"pattern": self.AADHAAR})

        with pytest.raises(ValidationError):
            validator.validate(value, {})

    @pytest.mark.parametrize("field_name,pattern,value", [
        ("phone", PHONE, "9876543210\n"),
        ("aadhaar", AADHAAR, "123456789012\n"),
    ])
    def test_trailing_newline_fails(self, field_name, pattern, value):
        """Test a final newline does not satisfy an end anchor"""
        validator = RegexValidator(field_name, {"pattern": pattern})

        with pytest.raises(ValidationError):
            validator.validate(value, {})

    def test_escaped_dollar_is_literal(self):
        validator = RegexValidator("fee", {"pattern": r"^\d+\$"})

        validator.validate("500$", {})  # Should not raise
        with pytest.raises(ValidationError):
            validator.validate("500", {})

    def test_digit_class_is_ascii_only(self):
        """Test non-ASCII digits do not satisfy \\d"""
        validator = RegexValidator("phone", {"pattern": self.PHONE})

        with pytest.raises(ValidationError):
            validator.validate("9٨٧٦٥٤٣٢١٠", {})

    def test_empty_value_is_skipped(self):
        validator = RegexValidator("phone", {"pattern": self.PHONE})
        validator.validate("", {})  # Should not raise

    def test_invalid_pattern_raises(self):
        with pytest.raises(ValueError, match="Invalid regex"):
            RegexValidator("phone", {"pattern": "[unclosed"})

    def test_missing_pattern_raises(self):
        with pytest.raises(ValueError, match="pattern"):
            RegexValidator("phone")

    @given(st.from_regex(r"[6-9][0-9]{9}", fullmatch=True))
    def test_property_well_formed_phones_pass(self, phone):
        """Property test: every 10-digit number starting with 6-9 passes"""
        validator = RegexValidator("phone", {"pattern": self.PHONE})
        validator.validate(phone, {})  # Should not raise


class TestForbiddenValueValidator:
    """Tests for ForbiddenValueValidator"""

    def test_forbidden_value_fails(self):
        validator = ForbiddenValueValidator("status", {
            "forbidden_value": "Rejected",
            "message": "Rejected candidates cannot be enrolled.",
        })

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("Rejected", {})

        assert exc_info.value.message == "Rejected candidates cannot be enrolled."

    @pytest.mark.parametrize("value", ["Cleared", "Waitlisted", "rejected", ""])
    def test_other_values_pass(self, value):
        """Test only the exact forbidden value fails"""
        validator = ForbiddenValueValidator("status", {"forbidden_value": "Rejected"})
        validator.validate(value, {})  # Should not raise


class TestDependencyValidator:
    """Tests for DependencyValidator"""

    @pytest.fixture
    def validator(self):
        return DependencyValidator("offer_sent", {
            "on_field": "status",
            "allowed_values": ["Cleared", "Waitlisted"],
            "message": "Offer letter can only be sent to Cleared or Waitlisted candidates.",
        })

    @pytest.mark.parametrize("status", ["Cleared", "Waitlisted"])
    def test_active_with_allowed_status_passes(self, validator, status):
        validator.validate(True, {"offer_sent": True, "status": status})  # Should not raise

    @pytest.mark.parametrize("status", ["Rejected", "", None])
    def test_active_with_disallowed_status_fails(self, validator, status):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(True, {"offer_sent": True, "status": status})

        assert exc_info.value.rule_name == "dependency"

    def test_inactive_always_passes(self, validator):
        validator.validate(False, {"offer_sent": False, "status": "Rejected"})  # Should not raise

    def test_non_empty_text_counts_as_active(self, validator):
        with pytest.raises(ValidationError):
            validator.validate("yes", {"status": "Rejected"})

    def test_missing_on_field_raises(self):
        with pytest.raises(ValueError, match="on_field"):
            DependencyValidator("offer_sent", {"allowed_values": ["Cleared"]})


class TestAgeRangeValidator:
    """Tests for AgeRangeValidator"""

    @pytest.fixture
    def validator(self):
        return AgeRangeValidator("dob", {
            "min_age": 18,
            "max_age": 35,
            "reference_date": REFERENCE_DATE,
            "message": "Age must be between 18 and 35",
        })

    @pytest.mark.parametrize("dob", ["2008-02-25", "1990-02-26", "2000-05-10"])
    def test_ages_within_range_pass(self, validator, dob):
        validator.validate(dob, {})  # Should not raise

    @pytest.mark.parametrize("dob,age", [("2008-02-26", 17), ("1990-02-24", 36)])
    def test_ages_outside_range_fail_with_age_in_message(self, validator, dob, age):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(dob, {})

        assert exc_info.value.message == f"Candidate age is {age}. Age must be between 18 and 35"

    @pytest.mark.parametrize("dob", ["", "not a date", "2001-02-29"])
    def test_unusable_dates_pass(self, validator, dob):
        """Test empty or unparseable dates produce no failure"""
        validator.validate(dob, {})  # Should not raise

    def test_missing_bounds_raise(self):
        with pytest.raises(ValueError):
            AgeRangeValidator("dob", {"min_age": 18})


class TestRangeValidator:
    """Tests for RangeValidator"""

    @pytest.fixture
    def validator(self):
        return RangeValidator("grad_year", {"min": 2015, "max": 2025, "message": "Out of range"})

    @pytest.mark.parametrize("value", ["2015", "2020", "2025", "2019abc"])
    def test_values_within_range_pass(self, validator, value):
        validator.validate(value, {})  # Should not raise

    @pytest.mark.parametrize("value", ["2014", "2026", "1999"])
    def test_values_outside_range_fail(self, validator, value):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(value, {})

        assert exc_info.value.message == "Out of range"
        assert exc_info.value.rule_name == "range"

    @pytest.mark.parametrize("value", ["", "abc", None])
    def test_unparseable_values_pass(self, validator, value):
        validator.validate(value, {})  # Should not raise

    def test_min_only(self):
        validator = RangeValidator("screening_score", {"min": 40})
        validator.validate("40", {})

        with pytest.raises(ValidationError):
            validator.validate("39", {})

    def test_float_parsing(self):
        validator = RangeValidator("score", {"min": 6.5, "parse": "float"})
        validator.validate("6.5", {})

        with pytest.raises(ValidationError):
            validator.validate("6.49", {})

    def test_no_bounds_raises(self):
        with pytest.raises(ValueError, match="at least one"):
            RangeValidator("grad_year", {})

    def test_unknown_parse_mode_raises(self):
        with pytest.raises(ValueError, match="parse mode"):
            RangeValidator("grad_year", {"min": 1, "parse": "decimal"})

    @given(st.integers(min_value=2015, max_value=2025))
    def test_property_years_in_range_pass(self, year):
        """Property test: every year in the range passes"""
        validator = RangeValidator("grad_year", {"min": 2015, "max": 2025})
        validator.validate(str(year), {})  # Should not raise


class TestThresholdValidator:
    """Tests for ThresholdValidator"""

    @pytest.fixture
    def validator(self):
        return ThresholdValidator("score", {"percentage": 60, "cgpa": 6.0})

    def test_percentage_below_threshold_fails(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("59", {}, EvaluationContext(is_cgpa=False))

        assert exc_info.value.message == "Percentage is below the recommended 60% threshold."

    def test_percentage_at_threshold_passes(self, validator):
        validator.validate("60", {}, EvaluationContext())  # Should not raise

    def test_cgpa_below_threshold_fails(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("5.9", {}, EvaluationContext(is_cgpa=True))

        assert exc_info.value.message == "CGPA is below the recommended 6 threshold."

    def test_cgpa_scale_selected_by_context(self, validator):
        """Test a CGPA of 7.5 passes in CGPA mode but fails as a percentage"""
        validator.validate("7.5", {}, EvaluationContext(is_cgpa=True))

        with pytest.raises(ValidationError):
            validator.validate("7.5", {}, EvaluationContext(is_cgpa=False))

    def test_missing_context_uses_percentage(self, validator):
        with pytest.raises(ValidationError):
            validator.validate("50", {})

    def test_fractional_threshold_in_message(self):
        validator = ThresholdValidator("score", {"percentage": 62.5, "cgpa": 6.5})

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("6", {}, EvaluationContext(is_cgpa=True))

        assert exc_info.value.message == "CGPA is below the recommended 6.5 threshold."

    @pytest.mark.parametrize("threshold,shown", [
        (2000000, "2000000"),
        (1234567.5, "1234567.5"),
        (62.123456789, "62.123456789"),
    ])
    def test_threshold_printed_in_full(self, threshold, shown):
        validator = ThresholdValidator("score", {"percentage": threshold, "cgpa": 6.0})

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("1", {}, EvaluationContext())

        assert exc_info.value.message == f"Percentage is below the recommended {shown}% threshold."

    @pytest.mark.parametrize("value", ["", "n/a"])
    def test_unusable_scores_pass(self, validator, value):
        validator.validate(value, {}, EvaluationContext())  # Should not raise


class TestRationaleValidator:
    """Tests for RationaleValidator and validate_rationale"""

    def test_29_characters_is_too_short(self):
        outcome = validate_rationale("x" * 29)

        assert outcome.status == "too_short"
        assert outcome.message == "Rationale must be at least 30 characters."
        assert not outcome

    def test_30_characters_without_keyword(self):
        outcome = validate_rationale("x" * 30)

        assert outcome.status == "missing_keyword"
        assert outcome.message == (
            "Rationale must include a valid keyword (e.g., 'approved by', 'special case')."
        )

    def test_keyword_present_is_ok(self):
        outcome = validate_rationale("This candidate is a special case for intake")

        assert outcome.status == "ok"
        assert outcome.message is None
        assert outcome

    @pytest.mark.parametrize("keyword", [
        "approved by", "special case", "documentation pending", "waiver granted",
    ])
    def test_every_default_keyword_is_accepted(self, keyword):
        assert validate_rationale(f"Exception request: {keyword} the committee").is_ok

    def test_keyword_match_is_case_insensitive(self):
        assert validate_rationale("This is a SPECIAL CASE for the board").is_ok

    def test_length_checked_before_keyword(self):
        """Test a short text with a keyword still reports too_short"""
        assert validate_rationale("special case").status == "too_short"

    def test_validate_raises_with_rule_name(self):
        validator = RationaleValidator()

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("too short", field_name="dob")

        assert exc_info.value.rule_name == "too_short"
        assert exc_info.value.field_name == "dob"

    def test_custom_policy(self):
        policy = ExceptionPolicy(min_rationale_length=5, keywords=["ok by hr"])

        assert validate_rationale("signed OK BY HR", policy).is_ok
        assert validate_rationale("signed", policy).status == "missing_keyword"

    def test_empty_keyword_list_disables_keyword_check(self):
        validator = RationaleValidator(min_length=10, keywords=[])
        assert validator.check("any long enough text").is_ok

    @given(st.text(max_size=29))
    def test_property_short_text_is_too_short(self, text):
        """Property test: any text under 30 characters is too short"""
        assert validate_rationale(text).status == "too_short"

    @given(st.text())
    def test_property_keyword_and_length_is_ok(self, text):
        """Property test: a keyword plus at least 30 characters is always accepted"""
        rationale = "Waiver granted by the admissions office. " + text
        assert validate_rationale(rationale).is_ok
