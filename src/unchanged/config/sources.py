"""Layered YAML settings source for unchanged configuration.

Configuration layers (in precedence order, highest first):
1. Constructor arguments and environment variables (pydantic-settings)
2. Project config: .unchanged.yaml in the working directory
3. User config: ~/.config/unchanged/config.yaml (or UNCHANGED_CONFIG_DIR)

File layers are combined with the package's own deep merge, so nested
sections merge key by key while scalars override.

Environment variables:
- UNCHANGED_CONFIG_DIR: Override user config directory (default: ~/.config/unchanged)
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import unchanged._engine as _engine

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "UNCHANGED_CONFIG_DIR"

PROJECT_CONFIG_NAME = ".unchanged.yaml"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def get_user_config_dir() -> _pathlib.Path:
    """Return the user config directory, honoring UNCHANGED_CONFIG_DIR."""
    if config_dir := _os.environ.get(ENV_CONFIG_DIR):
        return _pathlib.Path(config_dir).expanduser()
    return _pathlib.Path.home() / ".config" / "unchanged"


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML mapping from a file.

    An empty file loads as an empty dict.

    Raises:
        ConfigFileError: If the file can't be read, is malformed, or does
            not contain a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, str(e)) from e

    try:
        data = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(path, f"expected a mapping, got {type(data).__name__}")
    return data


class YamlLayersSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that deep-merges the user and project YAML files.

    Missing files are skipped; present files must hold a mapping.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Directory searched for .unchanged.yaml (default: cwd).
            user_config_path: Override path for the user config file (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._loaded_layers: list[_pathlib.Path] = []
        self._data = self._load_layers()

    @property
    def loaded_layers(self) -> list[_pathlib.Path]:
        """Config files that were found and loaded, lowest precedence first."""
        return list(self._loaded_layers)

    def _layer_paths(self) -> list[_pathlib.Path]:
        user_path = self._user_config_path or get_user_config_dir() / "config.yaml"
        project_root = self._project_root or _pathlib.Path.cwd()
        return [user_path, project_root / PROJECT_CONFIG_NAME]

    def _load_layers(self) -> dict[str, _typing.Any]:
        merged: dict[str, _typing.Any] = {}

        for path in self._layer_paths():
            if not path.is_file():
                continue
            merged = _engine.merge_values(merged, load_yaml_file(path), deep=True)
            self._loaded_layers.append(path)

        return merged

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """Return the merged value for a top-level field."""
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, _typing.Any]:
        """Return every merged value."""
        return dict(self._data)
