"""Configuration management for polygen."""

from polygen.core.config.loader import ConfigLoader, load_build_config
from polygen.core.config.settings import (
    GeneratorSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ConfigLoader",
    "load_build_config",
    "Settings",
    "LoggingSettings",
    "GeneratorSettings",
    "get_settings",
]
