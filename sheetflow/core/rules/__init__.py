"""
Validation rule engine, configuration management and built-in rule sets.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader
from .rule_engine import RuleEngine
from .rule_sets import employee_rules, event_rules, promotion_rules, reservation_rules

__all__ = [
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "event_rules",
    "employee_rules",
    "reservation_rules",
    "promotion_rules",
]
