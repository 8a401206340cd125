"""
Built-in presets covering required values, lengths, numeric ranges, type
checks and patterns.

They are not registered automatically. Opt in globally with
``register_presets(BUILTIN_PRESETS)`` or per validator with
``Validator(spec, presets=BUILTIN_PRESETS)``.

Arguments arrive as the strings written in the rule, so every preset
coerces its own parameters.
"""

import re
from typing import Any

TRUE_STRINGS = ("true", "1", "yes")
FALSE_STRINGS = ("false", "0", "no")


def required(value: Any) -> bool:
    """Fails for None and for blank strings."""
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    return True


def min_length(value: Any, minimum: str) -> bool:
    return _length(value) >= int(minimum)


def max_length(value: Any, maximum: str) -> bool:
    return _length(value) <= int(maximum)


def length_between(value: Any, minimum: str, maximum: str) -> bool:
    return int(minimum) <= _length(value) <= int(maximum)


def min_value(value: Any, minimum: str) -> bool:
    number = _to_number(value)
    return number is not None and number >= float(minimum)


def max_value(value: Any, maximum: str) -> bool:
    number = _to_number(value)
    return number is not None and number <= float(maximum)


def between(value: Any, minimum: str, maximum: str) -> bool:
    """Inclusive numeric range check."""
    number = _to_number(value)
    return number is not None and float(minimum) <= number <= float(maximum)


def integer(value: Any) -> bool:
    """
    Accepts ints and strings that parse as ints. Bools are rejected even
    though they are ints in Python.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, str):
        try:
            int(value.strip())
        except ValueError:
            return False
        return True
    return False


def number(value: Any) -> bool:
    return _to_number(value) is not None


def boolean(value: Any) -> bool:
    # Special handling for strings (avoid "False" -> True)
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS + FALSE_STRINGS
    return False


def matches(value: Any, pattern: str) -> bool:
    """Full match of ``str(value)`` against ``pattern``."""
    if value is None:
        return False
    return re.fullmatch(pattern, str(value)) is not None


def one_of(value: Any, *choices: str) -> bool:
    return str(value) in choices


def _length(value: Any) -> int:
    if value is None:
        return 0
    return len(value)


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


BUILTIN_PRESETS = {
    "required": required,
    "min-length": min_length,
    "max-length": max_length,
    "length-between": length_between,
    "min": min_value,
    "max": max_value,
    "between": between,
    "integer": integer,
    "number": number,
    "boolean": boolean,
    "matches": matches,
    "one-of": one_of,
}
