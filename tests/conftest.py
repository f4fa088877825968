"""
Shared pytest fixtures for unchanged tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import click.testing as _click_testing
import pytest as _pytest

import unchanged.config as config

# Environment keys prefixed with this are cleared for isolated tests
ENV_PREFIX = "UNCHANGED_"


# =============================================================================
# Sample Documents
# =============================================================================


@_pytest.fixture
def state() -> dict[str, _typing.Any]:
    """A nested document mixing dicts, lists and scalars."""
    return {
        "users": [
            {"name": "Ada", "roles": ["admin"]},
            {"name": "Grace", "roles": []},
        ],
        "settings": {"theme": "dark", "limits": {"rows": 10, "cols": 4}},
        "count": 0,
        "tags": ["a", "b"],
    }


# =============================================================================
# Environment Isolation
# =============================================================================


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with every UNCHANGED_* key removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return {k: v for k, v in _os.environ.items() if not k.startswith(ENV_PREFIX)}


@_pytest.fixture
def config_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """An empty user config directory."""
    directory = tmp_path / "user-config"
    directory.mkdir()
    return directory


@_pytest.fixture
def project_dir(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """An empty project directory that is also the working directory."""
    directory = tmp_path / "project"
    directory.mkdir()
    monkeypatch.chdir(directory)
    return directory


@_pytest.fixture
def isolated_env(
    clean_env: dict[str, str],
    config_dir: _pathlib.Path,
    project_dir: _pathlib.Path,
) -> _typing.Iterator[None]:
    """
    Isolate tests from the real environment and config files.

    The user config directory and working directory both point at empty
    temporary directories.
    """
    env = {**clean_env, "UNCHANGED_CONFIG_DIR": str(config_dir)}
    with _mock.patch.dict(_os.environ, env, clear=True):
        yield


@_pytest.fixture
def clean_settings(isolated_env: None) -> config.Settings:
    """Settings built from defaults only."""
    return config.Settings()


@_pytest.fixture
def runner(isolated_env: None) -> _typing.Iterator[_click_testing.CliRunner]:
    """A CliRunner inside the isolated environment."""
    yield _click_testing.CliRunner()

    # Drop the handler the CLI installs so it does not outlive the runner
    package_logger = _logging.getLogger("unchanged")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(_logging.NOTSET)
