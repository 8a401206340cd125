"""
Core data models for the value validation engine.

All models use Pydantic for runtime validation and type safety.
"""

from .preset_call import PresetCall
from .validation_outcome import ValidationOutcome

__all__ = [
    "PresetCall",
    "ValidationOutcome",
]
