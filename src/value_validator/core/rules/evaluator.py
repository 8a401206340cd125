"""
Sequential rule evaluation.

All rules must pass. Rules run in order and the run stops at the first one
that fails or reports an error. Results are interpreted as:

- an Exception (returned or raised): failure carrying RuleRaisedError
- any other falsy value: plain failure, no error
- any other truthy value: pass, continue with the next rule
- an awaitable or concurrent.futures.Future: waited for, then its result
  (or exception) is interpreted the same way

Evaluation stays synchronous until a rule returns something that is not
settled yet. From that point on the remaining rules are driven by a
coroutine, so purely synchronous rule lists never need an event loop.
"""

import asyncio
import inspect
from collections.abc import Coroutine, Sequence
from concurrent.futures import Future
from typing import Any, Union

from value_validator.core.errors import RuleRaisedError
from value_validator.core.models import ValidationOutcome
from value_validator.core.rules.normalizer import NormalizedRule
from value_validator.observability.logger import get_logger

logger = get_logger(__name__)

OutcomeOrPending = Union[ValidationOutcome, "PendingOutcome"]


def evaluate(
    rules: Sequence[NormalizedRule],
    value: Any,
    context: Any = None,
) -> OutcomeOrPending:
    """
    Evaluate ``value`` against ``rules``.

    Args:
        rules: Normalized rules, in declared order
        value: The value to validate
        context: Shared evaluation context handed to rules that accept it

    Returns:
        A ValidationOutcome when every invoked rule settled synchronously,
        otherwise a PendingOutcome that resolves to one. Rule failures never raise.
    """
    rules = tuple(rules)

    for index, rule in enumerate(rules):
        result = _poll(_invoke(rule, value, context))

        if _is_pending(result):
            return PendingOutcome(rules, index, result, value, context)

        outcome = _settle(rule, result, index)
        if outcome is not None:
            return outcome

    return ValidationOutcome(passed=True, rules_run=len(rules))


class PendingOutcome:
    """
    The remainder of an evaluation that met an unsettled rule result.

    Await it (or run ``resume()`` as a task) to get the ValidationOutcome.
    ``close()`` abandons it without running the remaining rules.
    """

    __slots__ = ("_rules", "_index", "_pending", "_value", "_context")

    def __init__(
        self,
        rules: tuple[NormalizedRule, ...],
        index: int,
        pending: Any,
        value: Any,
        context: Any,
    ):
        self._rules = rules
        self._index = index
        self._pending = pending
        self._value = value
        self._context = context

    def resume(self) -> Coroutine[Any, Any, ValidationOutcome]:
        """Coroutine driving the remaining rules, for asyncio.run or create_task."""
        return _evaluate_pending(
            self._rules, self._index, self._pending, self._value, self._context
        )

    def __await__(self):
        return self.resume().__await__()

    def close(self) -> None:
        # The rule's own coroutine has not been awaited yet
        if inspect.iscoroutine(self._pending):
            self._pending.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule={self._rules[self._index].source!r})"


async def _evaluate_pending(
    rules: tuple[NormalizedRule, ...],
    index: int,
    pending: Any,
    value: Any,
    context: Any,
) -> ValidationOutcome:
    outcome = _settle(rules[index], await _resolve(pending), index)
    if outcome is not None:
        return outcome

    for index in range(index + 1, len(rules)):
        rule = rules[index]
        result = await _resolve(_invoke(rule, value, context))

        outcome = _settle(rule, result, index)
        if outcome is not None:
            return outcome

    return ValidationOutcome(passed=True, rules_run=len(rules))


def _invoke(rule: NormalizedRule, value: Any, context: Any) -> Any:
    try:
        return rule(value, context)
    except Exception as exc:
        return exc


def _poll(result: Any) -> Any:
    """Unwrap a concurrent Future that has already settled."""
    if isinstance(result, Future) and result.done():
        try:
            return result.result()
        except Exception as exc:
            return exc
    return result


def _is_pending(result: Any) -> bool:
    return isinstance(result, Future) or inspect.isawaitable(result)


async def _resolve(result: Any) -> Any:
    """Wait until ``result`` is no longer awaitable; exceptions become values."""
    while _is_pending(result):
        awaitable = asyncio.wrap_future(result) if isinstance(result, Future) else result
        try:
            result = await awaitable
        except Exception as exc:
            return exc
    return result


def _settle(rule: NormalizedRule, result: Any, index: int) -> ValidationOutcome | None:
    """Return the final outcome if ``result`` stops the run, None to continue."""
    if isinstance(result, Exception):
        error = RuleRaisedError.from_cause(result, rule.source)
        logger.debug(
            "Rule raised an error",
            extra={"rule": rule.source, "position": index, "error_message": error.message},
        )
        return ValidationOutcome(
            passed=False, error=error, failed_rule=rule.source, rules_run=index + 1
        )

    if not result:
        logger.debug("Rule failed", extra={"rule": rule.source, "position": index})
        return ValidationOutcome(passed=False, failed_rule=rule.source, rules_run=index + 1)

    return None
