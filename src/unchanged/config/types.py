"""Configuration section models for unchanged settings.

- OutputConfig: how the CLI renders documents
- LoggingConfig: log level and format for the CLI

All sections use `extra="allow"` so unknown keys are preserved and can be
reported with `collect_all_extra_fields()` instead of being silently dropped.
"""

import typing as _typing

import pydantic as _pydantic

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config sections.

    Unknown fields are kept rather than dropped so typos can be audited.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this section and nested sections.

        Returns a flat dict keyed by dotted path, e.g.:
            {"output.indnet": 4}

        Args:
            prefix: Dotted path prefix (used in recursion).
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Output Settings
# =============================================================================


class OutputConfig(ConfigBase):
    """
    How documents are written by the CLI.

    YAML section: output.*
    """

    format: _typing.Literal["json", "yaml"] = "json"
    """Serialization format for results."""

    indent: int = _pydantic.Field(default=2, ge=0, le=8)
    """Indentation width (0 writes compact JSON)."""

    sort_keys: bool = False
    """Sort mapping keys in the output."""


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging configuration for the CLI.

    YAML section: logging.*
    """

    level: str = "WARNING"
    """Root log level name (DEBUG, INFO, WARNING, ...)."""

    format: str = "%(levelname)s %(name)s: %(message)s"
    """Log record format string."""

    @_pydantic.field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
