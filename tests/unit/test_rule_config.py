"""
Unit tests for rule configuration loading and building.
"""

import re
import textwrap

import pytest

from value_validator import (
    BUILTIN_PRESETS,
    DuplicatePresetError,
    GLOBAL_PRESETS,
    RuleConfigBuilder,
    RuleConfigLoader,
    Validator,
)


@pytest.fixture
def write_config(tmp_path):
    """Write YAML text to a temporary file and return its path"""
    def _write(text):
        path = tmp_path / "rules.yaml"
        path.write_text(textwrap.dedent(text))
        return path
    return _write


class TestRuleConfigLoader:
    """Tests for RuleConfigLoader"""

    def test_missing_file(self, tmp_path):
        """Test a missing file fails immediately"""
        with pytest.raises(FileNotFoundError):
            RuleConfigLoader(tmp_path / "missing.yaml")

    def test_rules_section_required(self, write_config):
        """Test files without a rules section are rejected"""
        path = write_config("presets: {}\n")
        with pytest.raises(ValueError, match="rules"):
            RuleConfigLoader(path).load_config()

    def test_invalid_yaml(self, write_config):
        """Test YAML syntax errors surface as ValueError"""
        path = write_config("rules: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            RuleConfigLoader(path).load_config()

    def test_unknown_regex_flag(self, write_config):
        """Test unknown regex flag names are rejected"""
        path = write_config(
            """
            rules:
              email:
                pattern: "@"
                flags: [SHOUTING]
            """
        )
        with pytest.raises(ValueError, match="SHOUTING"):
            RuleConfigLoader(path).load_config()

    def test_invalid_regex(self, write_config):
        """Test patterns that do not compile are rejected"""
        path = write_config(
            """
            rules:
              broken:
                pattern: "(unclosed"
            """
        )
        with pytest.raises(ValueError, match="Invalid regex"):
            RuleConfigLoader(path).load_config()

    def test_load_rules_shapes(self, write_config):
        """Test strings, lists and pattern mappings become rule specs"""
        path = write_config(
            r"""
            rules:
              username: "required|max-length:20"
              phone:
                - required
                - pattern: "^1\\d{10}$"
              email:
                pattern: "^[a-z]+@[a-z]+$"
                flags: [ignorecase]
            """
        )
        rules = RuleConfigLoader(path).load_rules()

        assert rules["username"] == ["required|max-length:20"]
        assert rules["phone"][0] == "required"
        assert rules["phone"][1].pattern == r"^1\d{10}$"
        assert rules["email"][0].flags & re.IGNORECASE

    def test_build_validators(self, write_config):
        """Test file presets are scoped to the validators built from it"""
        path = write_config(
            """
            presets:
              handle:
                - min-length:3
                - pattern: "^[a-z0-9_]+$"
            rules:
              username: "required|handle|max-length:8"
            """
        )
        validators = RuleConfigLoader(path).build_validators(presets=BUILTIN_PRESETS)

        username = validators["username"]
        assert isinstance(username, Validator)
        assert username.validate_sync("neo_1") is True
        assert username.validate_sync("Neo") is False
        assert username.validate_sync("waytoolonghandle") is False
        assert "handle" not in GLOBAL_PRESETS

    def test_build_validators_preset_collision(self, write_config):
        """Test caller presets may not repeat a file preset name"""
        path = write_config(
            """
            presets:
              required: ["min-length:1"]
            rules:
              name: required
            """
        )
        with pytest.raises(DuplicatePresetError):
            RuleConfigLoader(path).build_validators(presets=BUILTIN_PRESETS)


class TestRuleConfigBuilder:
    """Tests for RuleConfigBuilder"""

    def test_build(self):
        """Test the builder collects specs in order"""
        is_upper = str.isupper
        rules = RuleConfigBuilder() \
            .add_preset("length-between", 2, 6) \
            .add_regex("^[A-Z]+$", re.ASCII) \
            .add_predicate(is_upper) \
            .build()

        assert rules[0] == "length-between:2,6"
        assert rules[1].pattern == "^[A-Z]+$"
        assert rules[2] is is_upper

    def test_built_rules_validate(self):
        """Test built specs are accepted by Validator"""
        rules = RuleConfigBuilder().add_preset("between", 1, 5).add_regex(r"^\d$").build()
        validator = Validator(rules, presets=BUILTIN_PRESETS)
        assert validator.validate_sync("3") is True
        assert validator.validate_sync("7") is False

    def test_predicate_must_be_callable(self):
        """Test non-callables are rejected"""
        with pytest.raises(ValueError):
            RuleConfigBuilder().add_predicate("nope")

    def test_build_returns_copy(self):
        """Test later additions do not change an earlier build"""
        builder = RuleConfigBuilder().add_preset("required")
        built = builder.build()
        builder.add_preset("integer")
        assert built == ["required"]
