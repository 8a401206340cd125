"""
Pytest configuration and fixtures for value-validator tests

This module provides shared fixtures and preset helpers for the unit tests.
"""
import asyncio
import re
import threading

import pytest

from value_validator import GLOBAL_PRESETS, callback_rule


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# REGISTRY FIXTURES
# =======================

@pytest.fixture(autouse=True)
def isolated_global_presets():
    """
    Restore the global preset registry after each test

    Global registration is additive only, so tests that register presets
    would otherwise leak them into each other.
    """
    saved = dict(GLOBAL_PRESETS._entries)
    yield GLOBAL_PRESETS
    GLOBAL_PRESETS._entries.clear()
    GLOBAL_PRESETS._entries.update(saved)


# =======================
# PRESET FIXTURES
# =======================

async def username_taken(value):
    """Coroutine preset: "foo" is already taken"""
    await asyncio.sleep(0.01)
    if value == "foo":
        raise ValueError("foo already taken")
    return True


@callback_rule
def username_callback(value, done):
    """Callback preset reporting from another thread, like a network lookup"""
    error = "foo already taken" if value == "foo" else None
    threading.Timer(0.01, done, args=[error]).start()


@pytest.fixture
def sample_presets():
    """
    Presets mirroring a typical sign-up form

    Returns:
        Mapping suitable for Validator(presets=...) or register_presets()
    """
    return {
        "min-length": lambda v, min: len(v) >= int(min),
        "max-length": lambda v, max: len(v) <= int(max),
        "mobile": lambda v: re.search(r"1\d{10}", v) is not None,
        "username": username_taken,
        "between": lambda v, min, max: int(min) <= len(v) <= int(max),
        "min-length-6-username": ["min-length:6", "username"],
    }


@pytest.fixture
def callback_presets(sample_presets):
    """sample_presets with the callback flavour of the username preset"""
    return {**sample_presets, "username": username_callback}


@pytest.fixture
def call_log():
    """List that instrumented rules append their names to"""
    return []


@pytest.fixture
def make_rule(call_log):
    """
    Factory for instrumented rules

    Returns:
        Callable(name, result) -> rule that records its name and returns result
    """
    def factory(name, result):
        def rule(value):
            call_log.append(name)
            return result
        rule.__qualname__ = name
        return rule
    return factory
