"""
Error taxonomy for rule construction and evaluation.

Structural errors (invalid rule shapes, unknown presets, arity mismatches,
duplicate registrations) are raised while a validator is being built.
RuleRaisedError is the only error produced while a value is evaluated.
"""

from typing import Any


class ValueValidatorError(Exception):
    """Base class for every error raised by value_validator."""


class InvalidRuleError(ValueValidatorError, TypeError):
    """Raised when a rule of unrecognized shape is supplied."""

    def __init__(self, rule: Any, reason: str | None = None):
        self.rule = rule
        message = reason or f'invalid rule "{_render(rule)}"'
        super().__init__(f"value-validator: {message}")


class InvalidPresetError(ValueValidatorError, TypeError):
    """Raised when a preset entry is neither a callable nor a list."""

    def __init__(self, name: str, entry: Any):
        self.name = name
        self.entry = entry
        super().__init__(
            f'value-validator: preset "{name}" only accepts a function or a list, '
            f"got {type(entry).__name__}"
        )


class UnknownPresetError(ValueValidatorError, LookupError):
    """Raised when a preset name has no registry entry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'value-validator: unknown preset "{name}"')


class DuplicatePresetError(ValueValidatorError, ValueError):
    """Raised when a preset name is registered twice in the same registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'value-validator: preset "{name}" already defined')


class ArgumentCountError(ValueValidatorError, ValueError):
    """Raised when a preset string passes the wrong number of arguments."""

    def __init__(self, preset: str, expected: int, actual: int):
        self.preset = preset
        self.expected = expected
        self.actual = actual
        noun = "argument" if expected == 1 else "arguments"
        super().__init__(
            f'value-validator: preset "{preset}" accepts {expected} {noun}, got {actual}'
        )


class RuleRaisedError(ValueValidatorError):
    """
    Raised when a rule produces an error while a value is evaluated.

    The original cause is kept on ``cause``. It may be any object a rule
    reported through its error channel (a string, for instance); the message
    is always ``str(cause)``.
    """

    def __init__(self, cause: Any, rule: str | None = None):
        self.cause = cause
        self.rule = rule
        super().__init__(str(cause))
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    @property
    def message(self) -> str:
        return str(self.cause)

    @classmethod
    def from_cause(cls, cause: Any, rule: str | None = None) -> "RuleRaisedError":
        """Wrap ``cause`` unless it already is a RuleRaisedError."""
        if isinstance(cause, RuleRaisedError):
            if cause.rule is None:
                cause.rule = rule
            return cause
        return cls(cause, rule)


def _render(rule: Any) -> str:
    try:
        return str(rule)
    except Exception:
        return ""
