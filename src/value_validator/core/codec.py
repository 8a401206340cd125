"""
Preset string codec.

A codec turns a rule string such as ``"min-length:3|username"`` into an
ordered list of PresetCall objects. The default codec is pure and
deterministic; a validator may be given any other callable with the same
contract.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from value_validator.core.models import PresetCall

Codec = Callable[[str], Iterable[Any]]

RULE_SEPARATOR = "|"
NAME_SEPARATOR = ":"
ARG_SEPARATOR = ","


def default_codec(text: str) -> list[PresetCall]:
    """
    Decode a preset string.

    Segments are separated by ``|``; blank segments are dropped. Each
    segment is split on its first ``:`` into a name and a comma separated
    argument list. Names and arguments are stripped of whitespace.

    Examples:
        >>> [(c.name, c.args) for c in default_codec("a:1,2|b")]
        [('a', ['1', '2']), ('b', [])]
    """
    calls = []

    for segment in text.split(RULE_SEPARATOR):
        segment = segment.strip()
        if not segment:
            continue

        name, sep, rest = segment.partition(NAME_SEPARATOR)
        if not sep:
            calls.append(PresetCall(name=segment, args=[]))
            continue

        args = [arg.strip() for arg in rest.split(ARG_SEPARATOR)]
        calls.append(PresetCall(name=name.strip(), args=args))

    return calls


def encode_preset(name: str, *args: Any) -> str:
    """
    Render a single preset reference in the default codec format.

    Examples:
        >>> encode_preset("between", 2, 6)
        'between:2,6'
        >>> encode_preset("username")
        'username'
    """
    if not args:
        return name
    return f"{name}{NAME_SEPARATOR}{ARG_SEPARATOR.join(str(arg) for arg in args)}"


def coerce_call(call: Any) -> PresetCall:
    """
    Accept what a custom codec may yield: a PresetCall, a mapping with
    ``name``/``args`` keys, or a ``(name, args)`` pair. A lone string in
    ``args`` is one argument.
    """
    if isinstance(call, PresetCall):
        return call
    if isinstance(call, Mapping):
        return PresetCall.model_validate(
            {"name": call.get("name"), "args": _coerce_args(call.get("args"))}
        )
    if isinstance(call, tuple) and len(call) == 2:
        name, args = call
        return PresetCall(name=name, args=_coerce_args(args))
    raise TypeError(f"codec produced an unsupported item: {call!r}")


def _coerce_args(args: Any) -> list[Any]:
    if args is None:
        return []
    if isinstance(args, str):
        return [args]
    if not isinstance(args, Iterable) or isinstance(args, (bytes, Mapping)):
        raise TypeError(f"codec produced unsupported arguments: {args!r}")
    return list(args)
