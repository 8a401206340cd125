"""
Adapters for callback-style asynchronous rules.
"""

import functools
import inspect
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from value_validator.core.errors import RuleRaisedError

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

# Distinguishes done(None) from done(None, None)
_OMITTED = object()


def callback_rule(func: Callable[..., Any]) -> Callable[..., Future]:
    """
    Turn ``func(value, *args, done)`` into a rule returning a Future.

    ``func`` reports its result by calling ``done(error=None, passed)`` from
    any thread, at any later time. ``passed`` is read by truthiness, like a
    returned result; leaving it out means the rule passed. A truthy ``error``
    fails the rule: exceptions are kept as they are, anything else (a
    message string, for instance) is wrapped in RuleRaisedError with
    ``str(error)`` as message. Calls after the first are ignored. An
    exception raised by ``func`` before it calls ``done`` fails the rule
    as well.

    The returned callable advertises ``func``'s signature without the
    ``done`` parameter, so preset argument counting sees only the value and
    the preset arguments.

    Usage:
        @callback_rule
        def username(value, done):
            lookup_async(value, lambda taken: done("already taken" if taken else None))
    """
    sig = inspect.signature(func)
    positional = [p for p in sig.parameters.values() if p.kind in _POSITIONAL]
    if len(positional) < 2:
        raise TypeError(
            f"callback rule {func.__name__!r} must accept the value and a done callback"
        )
    done_param = positional[-1]

    @functools.wraps(func)
    def wrapper(value, *args, **kwargs):
        future: Future = Future()

        def done(error: Any = None, passed: Any = _OMITTED) -> None:
            if future.done():
                return
            if error:
                if isinstance(error, BaseException):
                    future.set_exception(error)
                else:
                    future.set_exception(RuleRaisedError(error))
                return
            future.set_result(True if passed is _OMITTED else bool(passed))

        try:
            func(value, *args, done, **kwargs)
        except Exception as exc:
            if not future.done():
                future.set_exception(exc)
            else:
                raise
        return future

    wrapper.__signature__ = sig.replace(
        parameters=[p for p in sig.parameters.values() if p is not done_param]
    )
    return wrapper
