"""
Shared pytest fixtures for extprops tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import unittest.mock as _mock

import pytest as _pytest

import extprops.config as config
import extprops.store as store

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "EXTPROPS_DELIMITER",
    "EXTPROPS_DEFAULT_FORMAT",
    "EXTPROPS_ENCODING",
    "EXTPROPS_WRITE_TIMESTAMP",
]


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with extprops keys removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def clean_settings(isolated_env) -> config.Settings:
    """Settings isolated from the environment, without date comments."""
    with isolated_env:
        return config.Settings(write_timestamp=False)


@_pytest.fixture
def connections() -> store.PropertyStore:
    """Two connection blocks plus one unprefixed key."""
    return store.PropertyStore(
        {
            "connection1.host": "localhost",
            "connection1.port": "1521",
            "connection1.service": "myDBService",
            "connection2.host": "10.10.10.1",
            "connection2.port": "1520",
            "timeout": "30",
        }
    )


@_pytest.fixture
def array_store() -> store.PropertyStore:
    """Store holding one array property and one plain property."""
    props = store.PropertyStore()
    props.set_array("hosts", ["a", "b", "c"])
    props.set_property("name", "primary")
    return props
