"""
Unit tests for preset registries.
"""

import pytest

from value_validator import (
    GLOBAL_PRESETS,
    DuplicatePresetError,
    InvalidPresetError,
    PresetRegistry,
    UnknownPresetError,
    Validator,
    register_preset,
    register_presets,
)


def always(value):
    return True


def never(value):
    return False


class TestPresetRegistry:
    """Tests for PresetRegistry"""

    def test_register_and_resolve(self):
        """Test a registered predicate resolves to itself"""
        registry = PresetRegistry().register("always", always)
        assert registry.resolve("always") is always

    def test_list_entries_are_frozen(self):
        """Test group presets are stored as tuples"""
        group = ["a", "b"]
        registry = PresetRegistry().register("group", group)
        group.append("c")
        assert registry.resolve("group") == ("a", "b")

    def test_duplicate_name_raises(self):
        """Test registering the same name twice fails"""
        registry = PresetRegistry().register("always", always)
        with pytest.raises(DuplicatePresetError) as exc_info:
            registry.register("always", never)
        assert exc_info.value.name == "always"
        assert registry.resolve("always") is always

    def test_invalid_entry_is_type_error(self):
        """Test entries other than callables and lists are rejected"""
        with pytest.raises(TypeError):
            PresetRegistry().register("bad", "not-a-rule")
        with pytest.raises(InvalidPresetError):
            PresetRegistry().register("bad", {"a": 1})

    def test_unknown_name_raises(self):
        """Test unresolved names raise UnknownPresetError"""
        with pytest.raises(UnknownPresetError) as exc_info:
            PresetRegistry().resolve("missing")
        assert exc_info.value.name == "missing"
        assert isinstance(exc_info.value, LookupError)

    def test_local_entries_shadow_parent(self):
        """Test lookups prefer the local registry over the parent"""
        parent = PresetRegistry().register("check", never)
        child = PresetRegistry(parent=parent).register("check", always)
        assert child.resolve("check") is always
        assert parent.resolve("check") is never

    def test_parent_is_read_live(self):
        """Test names registered on the parent later are visible in the child"""
        parent = PresetRegistry()
        child = PresetRegistry(parent=parent)
        parent.register("late", always)
        assert "late" in child
        assert child.resolve("late") is always

    def test_names_and_len(self):
        """Test names lists local names first, without duplicates"""
        parent = PresetRegistry().register_many({"a": always, "b": never})
        child = PresetRegistry(parent=parent).register_many({"b": always, "c": always})
        assert child.names() == ["b", "c", "a"]
        assert len(child) == 3
        assert list(child) == ["b", "c", "a"]

    def test_register_many_is_fail_fast(self):
        """Test entries before the failing key stay, later ones are not applied"""
        registry = PresetRegistry()
        with pytest.raises(InvalidPresetError):
            registry.register_many({"first": always, "broken": 42, "last": never})
        assert "first" in registry
        assert "broken" not in registry
        assert "last" not in registry


class TestGlobalRegistry:
    """Tests for process-wide registration"""

    def test_register_preset_is_visible_to_validators(self):
        """Test a globally registered preset resolves in new validators"""
        register_preset("always", always)
        assert "always" in GLOBAL_PRESETS
        assert Validator("always").validate_sync("x") is True

    def test_register_presets_chains(self):
        """Test module level registration returns the registry"""
        assert register_presets({"always": always}) is GLOBAL_PRESETS

    def test_validator_registration_chains(self):
        """Test Validator.register_preset returns the class for chaining"""
        assert Validator.register_preset("always", always) is Validator
        assert Validator.register_presets({"never": never}) is Validator
        assert Validator("never").validate_sync("x") is False

    def test_global_duplicate_raises(self):
        """Test duplicate global registration is a hard error"""
        register_preset("always", always)
        with pytest.raises(DuplicatePresetError):
            Validator.register_preset("always", never)

    def test_instance_presets_do_not_touch_global(self):
        """Test per-validator presets stay out of the global registry"""
        Validator("always", presets={"always": always})
        assert "always" not in GLOBAL_PRESETS
