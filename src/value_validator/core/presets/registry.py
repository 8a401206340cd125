"""
Preset registry.

Presets are named rule templates. An entry is either a predicate whose
first parameter is the value and whose remaining parameters are filled
from the preset string, or a list of rule specs that the preset expands to.

Registries are additive: a name can be registered once and never removed.
A registry may have a parent; lookups fall through to it when the name is
not registered locally. Validators use this to lay instance presets over
the process-wide GLOBAL_PRESETS.
"""

from collections.abc import Callable, Iterator, Mapping
from typing import Any, Union

from value_validator.core.errors import (
    DuplicatePresetError,
    InvalidPresetError,
    UnknownPresetError,
)
from value_validator.observability.logger import get_logger

logger = get_logger(__name__)

PresetEntry = Union[Callable[..., Any], list, tuple]


class PresetRegistry:
    """
    Name-keyed mapping of preset entries with parent fallback.
    """

    def __init__(self, parent: "PresetRegistry | None" = None):
        self.parent = parent
        self._entries: dict[str, PresetEntry] = {}

    def register(self, name: str, entry: PresetEntry) -> "PresetRegistry":
        """
        Register a preset under ``name``.

        Raises:
            DuplicatePresetError: If ``name`` is already registered here
            InvalidPresetError: If ``entry`` is neither callable nor a list
        """
        if name in self._entries:
            raise DuplicatePresetError(name)

        if not callable(entry) and not isinstance(entry, (list, tuple)):
            raise InvalidPresetError(name, entry)

        if isinstance(entry, (list, tuple)):
            entry = tuple(entry)

        self._entries[name] = entry
        logger.debug(
            "Registered preset",
            extra={"preset": name, "kind": "group" if isinstance(entry, tuple) else "predicate"},
        )
        return self

    def register_many(self, presets: Mapping[str, PresetEntry]) -> "PresetRegistry":
        """
        Register every entry of ``presets`` in iteration order.

        Fails fast: entries before the failing key stay registered and the
        remaining ones are not applied.
        """
        for name, entry in presets.items():
            self.register(name, entry)
        return self

    def resolve(self, name: str) -> PresetEntry:
        """
        Look ``name`` up here, then in the parent chain.

        Raises:
            UnknownPresetError: If no registry in the chain knows ``name``
        """
        registry: PresetRegistry | None = self
        while registry is not None:
            entry = registry._entries.get(name)
            if entry is not None:
                return entry
            registry = registry.parent
        raise UnknownPresetError(name)

    def names(self) -> list[str]:
        """Names visible through this registry, local ones first."""
        seen = dict.fromkeys(self._entries)
        if self.parent is not None:
            for name in self.parent.names():
                seen.setdefault(name, None)
        return list(seen)

    def __contains__(self, name: object) -> bool:
        try:
            self.resolve(name)  # type: ignore[arg-type]
        except UnknownPresetError:
            return False
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.names())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(local={list(self._entries)}, parent={self.parent!r})"


# Process-wide registry shared by every validator
GLOBAL_PRESETS = PresetRegistry()


def register_preset(name: str, entry: PresetEntry) -> PresetRegistry:
    """Register a preset in the global registry."""
    return GLOBAL_PRESETS.register(name, entry)


def register_presets(presets: Mapping[str, PresetEntry]) -> PresetRegistry:
    """Register several presets in the global registry, fail-fast."""
    return GLOBAL_PRESETS.register_many(presets)
