"""
Configuration for the unchanged command line tool.

Settings are read from YAML files and UNCHANGED_* environment variables.
"""

from unchanged.config.settings import Settings, load_settings
from unchanged.config.sources import ConfigFileError
from unchanged.config.types import ConfigBase, LoggingConfig, OutputConfig

__all__ = [
    "ConfigBase",
    "ConfigFileError",
    "LoggingConfig",
    "OutputConfig",
    "Settings",
    "load_settings",
]
