"""
value_validator - validate a value against an ordered list of rules.

Rules may be predicates (synchronous, coroutine functions, or callback
style), compiled regular expressions, or preset strings such as
``"min-length:3|username"`` resolved through a preset registry.
"""

from value_validator.core.codec import default_codec, encode_preset
from value_validator.core.errors import (
    ArgumentCountError,
    DuplicatePresetError,
    InvalidPresetError,
    InvalidRuleError,
    RuleRaisedError,
    UnknownPresetError,
    ValueValidatorError,
)
from value_validator.core.models import PresetCall, ValidationOutcome
from value_validator.core.presets import (
    BUILTIN_PRESETS,
    GLOBAL_PRESETS,
    PresetRegistry,
    register_preset,
    register_presets,
)
from value_validator.core.rules import (
    RuleConfigBuilder,
    RuleConfigLoader,
    callback_rule,
    evaluate,
    normalize,
)
from value_validator.core.validator import Validator

__version__ = "0.1.0"

__all__ = [
    "Validator",
    "ValidationOutcome",
    "PresetCall",
    "PresetRegistry",
    "GLOBAL_PRESETS",
    "BUILTIN_PRESETS",
    "register_preset",
    "register_presets",
    "default_codec",
    "encode_preset",
    "normalize",
    "evaluate",
    "callback_rule",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "ValueValidatorError",
    "InvalidRuleError",
    "InvalidPresetError",
    "UnknownPresetError",
    "ArgumentCountError",
    "DuplicatePresetError",
    "RuleRaisedError",
]
