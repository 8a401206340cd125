"""
Rule normalization, sequential evaluation and configuration management.
"""

from .async_rules import callback_rule
from .evaluator import PendingOutcome, evaluate
from .normalizer import NormalizedRule, RuleSpec, normalize
from .rule_config import RuleConfigBuilder, RuleConfigLoader

__all__ = [
    "NormalizedRule",
    "RuleSpec",
    "normalize",
    "evaluate",
    "PendingOutcome",
    "callback_rule",
    "RuleConfigLoader",
    "RuleConfigBuilder",
]
