"""
Named rule templates and the registries that hold them.
"""

from .builtin import BUILTIN_PRESETS
from .registry import (
    GLOBAL_PRESETS,
    PresetEntry,
    PresetRegistry,
    register_preset,
    register_presets,
)

__all__ = [
    "BUILTIN_PRESETS",
    "GLOBAL_PRESETS",
    "PresetEntry",
    "PresetRegistry",
    "register_preset",
    "register_presets",
]
