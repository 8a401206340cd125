"""
Validator: the public entry point tying normalization and evaluation together.

A validator is built from a rule spec (or a list of them). All rules are
normalized eagerly, so unknown presets, bad argument counts and invalid
rule shapes fail the constructor. Each ``validate`` call then walks the
normalized rules once, in order, stopping at the first failure.

Usage:
    Validator.register_presets({
        "min-length": lambda v, n: len(v) >= int(n),
    })

    validator = Validator("min-length:3", presets={"taken": is_taken})
    passed = await validator.validate("foo")

The rule list only grows through ``add``. Do not call ``add`` while a
``validate`` call on the same validator is still in flight.
"""

import asyncio
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from value_validator.core.codec import Codec, default_codec
from value_validator.core.errors import DuplicatePresetError, RuleRaisedError
from value_validator.core.models import ValidationOutcome
from value_validator.core.presets.registry import (
    GLOBAL_PRESETS,
    PresetEntry,
    PresetRegistry,
    register_preset,
    register_presets,
)
from value_validator.core.rules.evaluator import OutcomeOrPending, PendingOutcome, evaluate
from value_validator.core.rules.normalizer import NormalizedRule, normalize
from value_validator.observability.logger import get_logger

logger = get_logger(__name__)

Callback = Callable[[RuleRaisedError | None, bool], Any]

_OPTIONS = ("codec", "presets")


class Validator:
    """
    Checks values against an ordered list of rules; all must pass.

    Args:
        rules: A rule spec or a list of rule specs (preset strings,
            predicates, compiled patterns, nested lists)
        codec: Parser for preset strings, ``default_codec`` if omitted
        presets: Presets visible to this validator only; they shadow
            global presets of the same name
    """

    _default_options: ClassVar[dict[str, Any]] = {}

    def __init__(
        self,
        rules: Any = None,
        *,
        codec: Codec | None = None,
        presets: Mapping[str, PresetEntry] | None = None,
    ):
        defaults = self._default_options

        self._codec: Codec = codec or defaults.get("codec") or default_codec
        self._presets = PresetRegistry(parent=GLOBAL_PRESETS)
        self._presets.register_many(defaults.get("presets") or {})
        self._presets.register_many(presets or {})
        self._context: Any = None
        self._rules: list[NormalizedRule] = []

        if rules is not None:
            self._rules.extend(normalize(rules, self._presets, self._codec))

        logger.debug("Validator created", extra={"rule_count": len(self._rules)})

    def context(self, context: Any) -> "Validator":
        """Set the context object handed to every rule that accepts one."""
        self._context = context
        return self

    def add(self, rule: Any) -> "Validator":
        """
        Normalize ``rule`` and append it. Nothing is appended if
        normalization fails.
        """
        self._rules.extend(normalize(rule, self._presets, self._codec))
        return self

    def evaluate(self, value: Any) -> OutcomeOrPending:
        """
        Run the rules against ``value``.

        Returns a ValidationOutcome, or a PendingOutcome to await when a
        rule answered asynchronously.
        """
        return evaluate(self._rules, value, self._context)

    def validate(self, value: Any, callback: Callback | None = None):
        """
        Validate ``value``.

        Without ``callback``, returns an awaitable resolving to True/False
        and raising RuleRaisedError when a rule reported an error. The
        first rule runs before this method returns.

        With ``callback``, behaves like ``check``.
        """
        if callback is not None:
            return self.check(value, callback)
        return self._wait(self.evaluate(value))

    def check(self, value: Any, callback: Callback) -> "asyncio.Task | None":
        """
        Validate ``value`` and report through ``callback(error, passed)``.

        ``callback`` receives ``(None, True)`` on success, ``(None, False)``
        on a plain failure and ``(error, False)`` when a rule reported an
        error. It runs before ``check`` returns unless an asynchronous rule
        is met inside a running event loop; the remaining rules then run in
        a task, which is returned.
        """
        outcome = self.evaluate(value)

        if not isinstance(outcome, PendingOutcome):
            callback(outcome.error, outcome.passed)
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            outcome = asyncio.run(outcome.resume())
            callback(outcome.error, outcome.passed)
            return None

        task = loop.create_task(outcome.resume())
        task.add_done_callback(lambda t: _report(t, callback))
        return task

    def validate_sync(self, value: Any) -> bool:
        """
        Validate ``value`` and block until the result is known.

        Raises:
            RuleRaisedError: If a rule reported an error
            RuntimeError: If an asynchronous rule is met while an event loop
                is running in this thread
        """
        outcome = self.evaluate(value)

        if isinstance(outcome, PendingOutcome):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                outcome = asyncio.run(outcome.resume())
            else:
                outcome.close()
                raise RuntimeError(
                    "validate_sync() met an asynchronous rule inside a running "
                    "event loop; await validate() instead"
                )

        if outcome.error is not None:
            raise outcome.error
        return outcome.passed

    @staticmethod
    async def _wait(outcome: OutcomeOrPending) -> bool:
        if isinstance(outcome, PendingOutcome):
            outcome = await outcome
        if outcome.error is not None:
            raise outcome.error
        return outcome.passed

    @property
    def rules(self) -> tuple[NormalizedRule, ...]:
        return tuple(self._rules)

    @property
    def presets(self) -> PresetRegistry:
        return self._presets

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rules={[r.source for r in self._rules]})"

    @classmethod
    def defaults(cls, **options: Any) -> type["Validator"]:
        """
        Return a subclass whose constructor starts from ``options``.

        Recognized options are ``codec`` and ``presets``. Presets given
        here are registered on every instance before the instance's own
        presets; repeating a name there raises DuplicatePresetError.
        """
        unknown = set(options) - set(_OPTIONS)
        if unknown:
            raise TypeError(f"Unknown validator options: {', '.join(sorted(unknown))}")

        merged = dict(cls._default_options)
        if options.get("codec") is not None:
            merged["codec"] = options["codec"]

        presets = dict(merged.get("presets") or {})
        for name, entry in (options.get("presets") or {}).items():
            if name in presets:
                raise DuplicatePresetError(name)
            presets[name] = entry
        # Fail now rather than on first construction
        PresetRegistry().register_many(presets)
        merged["presets"] = presets

        return type(cls.__name__, (cls,), {"_default_options": merged})

    @classmethod
    def register_preset(cls, name: str, entry: PresetEntry) -> type["Validator"]:
        """Register a preset for every validator in the process."""
        register_preset(name, entry)
        return cls

    @classmethod
    def register_presets(cls, presets: Mapping[str, PresetEntry]) -> type["Validator"]:
        """Register several global presets in order, stopping at the first error."""
        register_presets(presets)
        return cls


def _report(task: "asyncio.Task", callback: Callback) -> None:
    if task.cancelled():
        logger.debug("Validation task cancelled before completion")
        return
    outcome: ValidationOutcome = task.result()
    callback(outcome.error, outcome.passed)
