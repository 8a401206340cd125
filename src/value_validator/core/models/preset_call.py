"""
PresetCall model representing one decoded segment of a preset string.
"""

from typing import List

from pydantic import BaseModel, Field


class PresetCall(BaseModel):
    """
    A preset reference parsed out of a rule string.

    Attributes:
        name: Registry key of the preset ("min-length")
        args: Trailing arguments as written, never coerced (["3"])
    """

    name: str = Field(..., min_length=1)
    args: List[str] = Field(default_factory=list)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "between",
                "args": ["2", "6"]
            }
        }
