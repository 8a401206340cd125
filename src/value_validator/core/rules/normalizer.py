"""
Rule normalization.

Turns every accepted rule shape into NormalizedRule objects, once, when a
validator is built:

- str: decoded by the codec into preset references, each resolved through
  the preset registry. Predicate presets are arity-checked and bound to
  their arguments; group presets are expanded in place.
- callable: used as is.
- compiled regular expression: passes when ``pattern.search`` finds a match.
- list/tuple: each item normalized in order, results concatenated.

Anything else raises InvalidRuleError. The evaluator never looks at rule
shapes again.
"""

import inspect
import re
from collections.abc import Callable
from typing import Any, Union

from pydantic import ValidationError

from value_validator.core.codec import Codec, coerce_call, default_codec, encode_preset
from value_validator.core.errors import ArgumentCountError, InvalidRuleError
from value_validator.core.presets.registry import GLOBAL_PRESETS, PresetRegistry
from value_validator.observability.logger import get_logger

logger = get_logger(__name__)

RuleSpec = Union[str, Callable[..., Any], re.Pattern, list, tuple]

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class NormalizedRule:
    """
    Uniform callable form of a rule: ``rule(value, context)``.

    ``context`` is forwarded as a keyword argument only to functions that
    declare a keyword-only ``context`` parameter or ``**kwargs``.
    """

    __slots__ = ("func", "args", "source", "takes_context")

    def __init__(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        source: str | None = None,
        takes_context: bool | None = None,
    ):
        self.func = func
        self.args = tuple(args)
        self.source = source or _describe(func)
        self.takes_context = _accepts_context(func) if takes_context is None else takes_context

    def __call__(self, value: Any, context: Any = None) -> Any:
        if self.takes_context:
            return self.func(value, *self.args, context=context)
        return self.func(value, *self.args)

    def __repr__(self) -> str:
        return f"NormalizedRule({self.source})"


def normalize(
    rule: Any,
    registry: PresetRegistry = GLOBAL_PRESETS,
    codec: Codec = default_codec,
) -> list[NormalizedRule]:
    """
    Normalize a rule spec into an ordered list of NormalizedRule.

    Raises:
        InvalidRuleError: If a rule has an unsupported shape, a rule string
            cannot be decoded, or a group preset expands into itself
        UnknownPresetError: If a preset name is not registered
        ArgumentCountError: If a preset gets the wrong number of arguments
    """
    return _normalize(rule, registry, codec, ())


def _normalize(
    rule: Any,
    registry: PresetRegistry,
    codec: Codec,
    expanding: tuple[str, ...],
) -> list[NormalizedRule]:
    if isinstance(rule, str):
        return _expand_presets(rule, registry, codec, expanding)

    if isinstance(rule, re.Pattern):
        return [_wrap_pattern(rule)]

    if callable(rule):
        return [NormalizedRule(rule)]

    if isinstance(rule, (list, tuple)):
        rules = []
        for item in rule:
            rules.extend(_normalize(item, registry, codec, expanding))
        return rules

    logger.debug("Rejected invalid rule", extra={"rule_type": type(rule).__name__})
    raise InvalidRuleError(rule)


def _expand_presets(
    text: str,
    registry: PresetRegistry,
    codec: Codec,
    expanding: tuple[str, ...],
) -> list[NormalizedRule]:
    try:
        calls = [coerce_call(call) for call in codec(text)]
    except (ValidationError, TypeError) as e:
        raise InvalidRuleError(text, f'cannot decode rule "{text}": {e}') from e

    rules = []
    for call in calls:
        entry = registry.resolve(call.name)

        if isinstance(entry, tuple):
            # Group presets take no arguments of their own
            if call.args:
                raise ArgumentCountError(call.name, 0, len(call.args))
            if call.name in expanding:
                chain = " -> ".join(expanding + (call.name,))
                raise InvalidRuleError(text, f'preset "{call.name}" expands into itself ({chain})')
            rules.extend(_normalize(list(entry), registry, codec, expanding + (call.name,)))
            continue

        _check_arity(call.name, entry, call.args)
        rules.append(
            NormalizedRule(entry, tuple(call.args), source=encode_preset(call.name, *call.args))
        )

    return rules


def _check_arity(name: str, func: Callable[..., Any], args: list[str]) -> None:
    """
    Compare the preset arguments with the predicate's positional parameters,
    the first of which receives the value.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        logger.debug("Skipping argument count check, signature unavailable", extra={"preset": name})
        return

    params = list(sig.parameters.values())
    positional = [p for p in params if p.kind in _POSITIONAL]
    variadic = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)

    if not positional and not variadic:
        raise InvalidRuleError(func, f'preset "{name}" must accept the value as its first argument')

    required = len([p for p in positional if p.default is inspect.Parameter.empty])
    minimum = max(required - 1, 0)
    maximum = None if variadic else max(len(positional) - 1, 0)
    actual = len(args)

    if actual < minimum:
        raise ArgumentCountError(name, minimum, actual)
    if maximum is not None and actual > maximum:
        raise ArgumentCountError(name, maximum, actual)


def _accepts_context(func: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False

    for p in params:
        if p.kind is inspect.Parameter.VAR_KEYWORD:
            return True
        if p.kind is inspect.Parameter.KEYWORD_ONLY and p.name == "context":
            return True
    return False


def _wrap_pattern(pattern: re.Pattern) -> NormalizedRule:
    def test(value: Any) -> bool:
        if not isinstance(value, (str, bytes)):
            value = str(value)
        return pattern.search(value) is not None

    return NormalizedRule(test, source=f"/{pattern.pattern}/", takes_context=False)


def _describe(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or repr(func)
