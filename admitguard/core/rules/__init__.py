"""
Rule engine, rule configuration and the runtime rule store.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader, load_default_rule_set, parse_rule_config
from .rule_engine import RuleEngine, build_validators, evaluate
from .rule_store import RuleStore

__all__ = [
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "RuleStore",
    "build_validators",
    "evaluate",
    "load_default_rule_set",
    "parse_rule_config",
]
