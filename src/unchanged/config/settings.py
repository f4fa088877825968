"""
Settings for the unchanged command line tool.

Sources, highest precedence first:
1. Constructor arguments
2. Environment variables (UNCHANGED_*, nested with "__", e.g.
   UNCHANGED_OUTPUT__INDENT=4)
3. Project config (.unchanged.yaml in the working directory)
4. User config (~/.config/unchanged/config.yaml)
5. Defaults from the section models
"""

import logging as _logging
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import unchanged.config.sources as sources
import unchanged.config.types as types

_logger = _logging.getLogger(__name__)


class Settings(_pydantic_settings.BaseSettings):
    """Top-level settings, one attribute per YAML section."""

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="UNCHANGED_",
        env_nested_delimiter="__",  # UNCHANGED_OUTPUT__FORMAT
        extra="allow",
    )

    output: types.OutputConfig = _pydantic.Field(default_factory=types.OutputConfig)
    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """Put constructor arguments and environment above the YAML layers."""
        return (
            init_settings,
            env_settings,
            sources.YamlLayersSettingsSource(settings_cls),
        )

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """Unknown keys from every section, keyed by dotted path."""
        result: dict[str, _typing.Any] = dict(self.model_extra or {})
        result.update(self.output.collect_all_extra_fields("output"))
        result.update(self.logging.collect_all_extra_fields("logging"))
        return result

    def warn_unknown_fields(self) -> None:
        """Log a warning for every unknown configuration key."""
        for path in sorted(self.collect_all_extra_fields()):
            _logger.warning("Unknown configuration key: %s", path)


def load_settings(**overrides: _typing.Any) -> Settings:
    """
    Build Settings from every source.

    Args:
        **overrides: Section values that take precedence over files and
            environment, e.g. ``output={"format": "yaml"}``.

    Raises:
        sources.ConfigFileError: If a config file is unreadable or malformed.
        pydantic.ValidationError: If a value fails validation.
    """
    return Settings(**overrides)
