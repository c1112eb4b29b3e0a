"""Configuration for gitfrisky."""

from gitfrisky.config.config_loader import ConfigError, ConfigLoader, ConfigParsingError
from gitfrisky.config.config_schema import AppConfigSchema

__all__ = ["AppConfigSchema", "ConfigError", "ConfigLoader", "ConfigParsingError"]
