"""
Rule store: the runtime-editable, persisted rule configuration.

Overrides are saved as plain JSON under the ``admitguard_rules`` key. Without
overrides the store serves the default rule set. Every edit produces a new
RuleSet version; readers always receive a whole, immutable RuleSet.
"""

from typing import Any

from admitguard.core.models import RuleSet
from admitguard.observability.logger import get_logger
from admitguard.observability.metrics import rule_set_version, set_gauge
from admitguard.storage.kv_store import RULES_KEY, KeyValueStore

from .rule_config import load_default_rule_set, parse_rule_config

logger = get_logger(__name__)


class RuleStore:
    """
    Holds the active RuleSet and persists edits to a key-value store.
    """

    def __init__(self, store: KeyValueStore, defaults: RuleSet | None = None):
        """
        Args:
            store: Key-value store for rule overrides
            defaults: Rule set served when no overrides exist (packaged defaults if None)
        """
        self.store = store
        self.defaults = defaults or load_default_rule_set()

    def current(self) -> RuleSet:
        """
        Return the active rule set.

        Raises:
            RuleConfigError: If persisted overrides are invalid
        """
        config = self.store.get(RULES_KEY)
        if config is None:
            return self.defaults
        return parse_rule_config(config)

    def _save(self, rule_set: RuleSet) -> RuleSet:
        self.store.set(RULES_KEY, rule_set.to_config())
        set_gauge(rule_set_version, rule_set.version)
        return rule_set

    def patch(self, field_name: str, attribute: str, value: Any) -> RuleSet:
        """
        Set one attribute of one field's rule and persist the result.

        Raises:
            RuleConfigError: If the field, attribute or value is invalid
        """
        rule_set = self.current().patch(field_name, attribute, value)
        self._save(rule_set)
        logger.info(
            f"Patched rule {field_name}.{attribute}",
            extra={"field_name": field_name, "attribute": attribute, "version": rule_set.version},
        )
        return rule_set

    def replace(self, rules: dict[str, Any], exception_policy: dict[str, Any] | None = None) -> RuleSet:
        """
        Replace every rule wholesale and persist the result.

        Args:
            rules: Field name -> rule definition (``type`` or ``rule_type`` keyed)
            exception_policy: Optional new exception policy

        Raises:
            RuleConfigError: If the new rules are invalid
        """
        current = self.current()
        parsed = parse_rule_config({
            "rules": rules,
            "exception_policy": exception_policy or current.exception_policy.model_dump(),
        })
        rule_set = current.replace(dict(parsed.rules), parsed.exception_policy)
        self._save(rule_set)
        logger.info(
            "Replaced rule set",
            extra={"fields": rule_set.fields, "version": rule_set.version},
        )
        return rule_set

    def reset(self) -> RuleSet:
        """
        Restore the default rules. The version still increases so that the
        reset is observable as a configuration change.
        """
        current = self.current()
        rule_set = self.defaults.model_copy(update={"version": current.version + 1})
        self._save(rule_set)
        logger.info("Reset rules to defaults", extra={"version": rule_set.version})
        return rule_set

    def has_overrides(self) -> bool:
        return self.store.get(RULES_KEY) is not None

