"""
Rule configuration management.

Loads intake rules from YAML files and provides utilities
for building rule configurations programmatically.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from admitguard.core.errors import RuleConfigError
from admitguard.core.models import RuleSet
from admitguard.core.models.rule import RULE_TYPES

DEFAULT_RULES_PATH = Path(__file__).with_name("default_rules.yaml")


def parse_rule_config(config: dict[str, Any], version: int = 1) -> RuleSet:
    """
    Build a RuleSet from a configuration mapping.

    Accepts ``type`` as an alias of ``rule_type`` in each rule definition.

    Raises:
        RuleConfigError: If the configuration is malformed
    """
    if not config or "rules" not in config:
        raise RuleConfigError("Configuration must contain 'rules' section")

    field_rules = config["rules"]
    if not isinstance(field_rules, dict):
        raise RuleConfigError("'rules' must be a mapping of field name to rule")

    rules = {
        field_name: _parse_rule(field_name, rule_def)
        for field_name, rule_def in field_rules.items()
    }

    try:
        return RuleSet(
            version=config.get("version", version),
            rules=rules,
            exception_policy=config.get("exception_policy") or {},
        )
    except ValidationError as e:
        raise RuleConfigError(f"Invalid rule configuration: {e}") from e


def _parse_rule(field_name: str, rule_def: Any) -> dict[str, Any]:
    """
    Normalize a single rule definition.

    Raises:
        RuleConfigError: If the rule definition is invalid
    """
    if not isinstance(rule_def, dict):
        raise RuleConfigError(f"Rule for field '{field_name}' must be a mapping")

    rule = dict(rule_def)
    rule_type = rule.pop("type", None) or rule.get("rule_type")
    if rule_type is None:
        raise RuleConfigError(f"Rule for field '{field_name}' is missing 'type'")
    if rule_type not in RULE_TYPES:
        raise RuleConfigError(
            f"Unknown rule type '{rule_type}' for field '{field_name}'. "
            f"Must be one of: {', '.join(RULE_TYPES)}"
        )

    rule["rule_type"] = rule_type
    return rule


class RuleConfigLoader:
    """
    Loads intake rules from YAML configuration files.

    Expected YAML format:
    ```yaml
    exception_policy:
      min_rationale_length: 30
      flag_threshold: 2

    rules:
      phone:
        type: strict
        required: true
        pattern: '^[6-9]\\d{9}$'
        error_message: Phone must be 10 digits starting with 6, 7, 8, or 9.

      screening_score:
        type: minimum
        minimum: 40
        error_message: Screening score is below the passing mark of 40.
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_config(self) -> dict[str, Any]:
        """Read the raw YAML mapping."""
        with open(self.config_path) as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise RuleConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(config, dict):
            raise RuleConfigError(f"{self.config_path} must contain a mapping")
        return config

    def load_rule_set(self) -> RuleSet:
        """
        Load and parse rules from the YAML file.

        Returns:
            RuleSet suitable for the validation orchestrator

        Raises:
            RuleConfigError: If YAML is invalid or rules are malformed
        """
        return parse_rule_config(self.load_config())


def load_default_rule_set() -> RuleSet:
    """
    Load the default rule set.

    ``ADMITGUARD_RULES_FILE`` points at a YAML file that replaces the
    packaged defaults.
    """
    config_path = os.getenv("ADMITGUARD_RULES_FILE") or DEFAULT_RULES_PATH
    return RuleConfigLoader(config_path).load_rule_set()


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (for testing or dynamic rules).
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: dict[str, dict[str, Any]] = {}
        self.exception_policy: dict[str, Any] = {}

    def add_strict(
        self,
        field_name: str,
        error_message: str,
        required: bool = False,
        min_length: int | None = None,
        pattern: str | None = None,
        forbidden_value: str | None = None,
        forbidden_message: str | None = None,
        required_message: str | None = None,
    ) -> "RuleConfigBuilder":
        """Add a strict rule."""
        rule: dict[str, Any] = {
            "rule_type": "strict",
            "required": required,
            "error_message": error_message,
        }
        if min_length is not None:
            rule["min_length"] = min_length
        if pattern is not None:
            rule["pattern"] = pattern
        if forbidden_value is not None:
            rule["forbidden_value"] = forbidden_value
            rule["forbidden_message"] = forbidden_message
        if required_message is not None:
            rule["required_message"] = required_message
        self.rules[field_name] = rule
        return self

    def add_dependency(
        self,
        field_name: str,
        on_field: str,
        allowed_values: list[str],
        error_message: str,
    ) -> "RuleConfigBuilder":
        """Add a strict rule that only allows the field when another field holds an allowed value."""
        self.rules[field_name] = {
            "rule_type": "strict",
            "dependency": {"on_field": on_field, "allowed_values": list(allowed_values)},
            "error_message": error_message,
        }
        return self

    def add_age_range(
        self,
        field_name: str,
        min_age: int,
        max_age: int,
        error_message: str,
        reference_date: Any = None,
    ) -> "RuleConfigBuilder":
        """Add an age range rule."""
        rule: dict[str, Any] = {
            "rule_type": "age_range",
            "age_range": (min_age, max_age),
            "error_message": error_message,
        }
        if reference_date is not None:
            rule["reference_date"] = reference_date
        self.rules[field_name] = rule
        return self

    def add_year_range(
        self,
        field_name: str,
        min_year: int,
        max_year: int,
        error_message: str,
    ) -> "RuleConfigBuilder":
        """Add a year range rule."""
        self.rules[field_name] = {
            "rule_type": "year_range",
            "year_range": (min_year, max_year),
            "error_message": error_message,
        }
        return self

    def add_threshold(
        self,
        field_name: str,
        percentage: float,
        cgpa: float,
        error_message: str,
    ) -> "RuleConfigBuilder":
        """Add a score threshold rule."""
        self.rules[field_name] = {
            "rule_type": "threshold",
            "thresholds": {"percentage": percentage, "cgpa": cgpa},
            "error_message": error_message,
        }
        return self

    def add_minimum(self, field_name: str, minimum: float, error_message: str) -> "RuleConfigBuilder":
        """Add a minimum value rule."""
        self.rules[field_name] = {
            "rule_type": "minimum",
            "minimum": minimum,
            "error_message": error_message,
        }
        return self

    def with_exception_policy(self, **policy: Any) -> "RuleConfigBuilder":
        """Override exception policy settings (min_rationale_length, keywords, flag_threshold)."""
        self.exception_policy.update(policy)
        return self

    def build(self) -> dict[str, Any]:
        """Build and return the rule configuration."""
        return {"rules": dict(self.rules), "exception_policy": dict(self.exception_policy)}

    def build_rule_set(self) -> RuleSet:
        """Build the configuration and parse it into a RuleSet."""
        return parse_rule_config(self.build())
