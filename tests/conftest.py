"""
Shared pytest fixtures for propstore tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import propstore.resources as resources
import propstore.settings as settings_module

RESOURCES_DIR = _pathlib.Path(__file__).parent / "fixtures" / "resources"
"""Directory holding the property files used across loader tests."""

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "PROPSTORE_BUNDLE_DIR",
    "PROPSTORE_ENCODING",
    "PROPSTORE_STRIP_JSON_COMMENTS",
    "PROPSTORE_REFLECTION_MAX_DEPTH",
]


@_pytest.fixture(autouse=True)
def clean_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Keep PROPSTORE_* variables from the developer's shell out of tests."""
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)


@_pytest.fixture
def resources_dir() -> _pathlib.Path:
    """Path to the fixture property files."""
    return RESOURCES_DIR


@_pytest.fixture
def bundle() -> resources.Bundle:
    """Bundle rooted at the fixture property files."""
    return resources.Bundle(RESOURCES_DIR)


@_pytest.fixture
def settings() -> settings_module.PropertySettings:
    """Default settings, isolated from any .env file."""
    return settings_module.PropertySettings.construct_without_dotenv()


@_pytest.fixture
def write_resource(tmp_path: _pathlib.Path) -> _typing.Callable[[str, str | bytes], _pathlib.Path]:
    """Factory writing a file into tmp_path and returning its path."""

    def _write(filename: str, content: str | bytes) -> _pathlib.Path:
        path = tmp_path / filename
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write
