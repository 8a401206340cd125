"""
Rule configuration management.

Loads named rule sets and group presets from YAML files and provides a
builder for assembling rule specs in code.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from value_validator.core.codec import encode_preset
from value_validator.core.errors import DuplicatePresetError
from value_validator.observability.logger import get_logger, log_operation

logger = get_logger(__name__)


class PatternRule(BaseModel):
    """A regular expression rule as written in a configuration file."""

    pattern: str
    flags: List[str] = Field(default_factory=list)

    @field_validator("pattern")
    @classmethod
    def check_pattern(cls, v):
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")
        return v

    @field_validator("flags")
    @classmethod
    def check_flags(cls, v):
        unknown = [flag for flag in v if not hasattr(re.RegexFlag, flag.upper())]
        if unknown:
            raise ValueError(f"Unknown regex flags: {', '.join(unknown)}")
        return v

    def compile(self) -> re.Pattern:
        flags = 0
        for flag in self.flags:
            flags |= getattr(re.RegexFlag, flag.upper())
        return re.compile(self.pattern, flags)


RuleItem = Union[str, PatternRule]


class RuleConfig(BaseModel):
    """Top level layout of a rule configuration file."""

    presets: Dict[str, List[RuleItem]] = Field(default_factory=dict)
    rules: Dict[str, Union[RuleItem, List[RuleItem]]] = Field(default_factory=dict)


class RuleConfigLoader:
    """
    Loads rule sets from YAML configuration files.

    Expected YAML format:
    ```yaml
    presets:
      handle:
        - min-length:3
        - pattern: "^[a-z0-9_]+$"

    rules:
      username: "required|handle|max-length:20"
      phone:
        - required
        - pattern: "^1\\\\d{10}$"
      email:
        pattern: "^[^@]+@[^@]+$"
        flags: [IGNORECASE]
    ```

    Group presets are scoped to the validators built from the file; they
    are never added to the global registry.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_config(self) -> RuleConfig:
        """
        Parse and validate the configuration file.

        Raises:
            ValueError: If YAML is invalid or does not match the expected layout
        """
        with open(self.config_path) as f:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not raw or "rules" not in raw:
            raise ValueError("Configuration file must contain 'rules' section")

        try:
            return RuleConfig.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid rule configuration in {self.config_path}: {e}") from e

    def load_presets(self) -> dict[str, list[Any]]:
        """Return the group presets declared in the file as rule spec lists."""
        config = self.load_config()
        return {name: [_to_spec(item) for item in items] for name, items in config.presets.items()}

    def load_rules(self) -> dict[str, list[Any]]:
        """Return each named rule set as a list of rule specs."""
        config = self.load_config()
        rules = {}
        for name, spec in config.rules.items():
            items = spec if isinstance(spec, list) else [spec]
            rules[name] = [_to_spec(item) for item in items]
        return rules

    def build_validators(self, **options: Any) -> dict[str, Any]:
        """
        Build one Validator per named rule set.

        Args:
            **options: Validator options; ``presets`` given here are
                registered next to the file's presets

        Raises:
            DuplicatePresetError: If ``presets`` repeats a name from the file
        """
        from value_validator.core.validator import Validator

        with log_operation("Building validators from config", logger=logger, path=str(self.config_path)):
            presets: dict[str, Any] = self.load_presets()
            for name, entry in (options.pop("presets", None) or {}).items():
                if name in presets:
                    raise DuplicatePresetError(name)
                presets[name] = entry

            return {
                name: Validator(spec, presets=presets, **options)
                for name, spec in self.load_rules().items()
            }


class RuleConfigBuilder:
    """
    Programmatically build rule spec lists (for testing or dynamic rules).
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[Any] = []

    def add_preset(self, name: str, *args: Any) -> "RuleConfigBuilder":
        """Add a preset reference; arguments are rendered as strings."""
        self.rules.append(encode_preset(name, *args))
        return self

    def add_regex(self, pattern: str | re.Pattern, flags: int = 0) -> "RuleConfigBuilder":
        """Add a regular expression rule."""
        if isinstance(pattern, str):
            pattern = re.compile(pattern, flags)
        self.rules.append(pattern)
        return self

    def add_predicate(self, predicate) -> "RuleConfigBuilder":
        """Add a predicate rule."""
        if not callable(predicate):
            raise ValueError("predicate must be callable")
        self.rules.append(predicate)
        return self

    def build(self) -> list[Any]:
        """Build and return the rule spec list."""
        return list(self.rules)


def _to_spec(item: RuleItem) -> Any:
    if isinstance(item, PatternRule):
        return item.compile()
    return item
