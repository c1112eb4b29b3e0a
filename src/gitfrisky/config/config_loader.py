"""
Configuration loader for gitfrisky.

This module provides functionality for loading and managing
configuration settings.

"""

import logging
from pathlib import Path
from typing import Any

import yaml
from xdg.BaseDirectory import xdg_config_home

from gitfrisky.config.config_schema import AppConfigSchema

logger = logging.getLogger(__name__)

LOCAL_CONFIG_NAME = ".gitfrisky.yml"


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigParsingError(ConfigError):
	"""Exception raised when configuration file cannot be parsed."""


class ConfigLoader:
	"""
	Loads configuration for gitfrisky into pydantic schemas.

	Values missing from the file fall back to the schema defaults.

	"""

	_instance = None  # For singleton pattern

	@classmethod
	def get_instance(cls, config_file: Path | None = None, reload: bool = False) -> "ConfigLoader":
		"""
		Get the singleton instance of ConfigLoader.

		Args:
			config_file: Path to configuration file (optional)
			reload: Whether to reload config even if already loaded

		Returns:
			ConfigLoader: Singleton instance

		"""
		if cls._instance is None:
			cls._instance = cls(config_file)
		elif reload:
			cls._instance.reload_config(config_file)
		return cls._instance

	def __init__(self, config_file: Path | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
			config_file: Path to configuration file (optional)

		"""
		self._config_file = config_file
		self._resolved_config_file = self._resolve_config_file(config_file)
		self._app_config = self._load_config()

	def reload_config(self, config_file: Path | None = None) -> None:
		"""Reload configuration, optionally from a new file."""
		if config_file is not None:
			self._config_file = config_file
		self._resolved_config_file = self._resolve_config_file(self._config_file)
		self._app_config = self._load_config()
		logger.debug("Configuration reloaded")

	def _resolve_config_file(self, config_file: Path | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. ./.gitfrisky.yml in the current directory
		2. $XDG_CONFIG_HOME/gitfrisky/config.yml

		"""
		if config_file:
			path = config_file.expanduser().resolve()
			if not path.exists():
				logger.warning("Specified config file not found: %s", path)
			return path

		local_config = Path(LOCAL_CONFIG_NAME)
		if local_config.exists():
			return local_config

		xdg_config_file = Path(xdg_config_home) / "gitfrisky" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		return None

	@staticmethod
	def _parse_yaml_file(file_path: Path) -> dict[str, Any]:
		"""
		Parse a YAML file into a dictionary.

		Raises:
			yaml.YAMLError: If the file cannot be parsed as a YAML dictionary

		"""
		with file_path.open(encoding="utf-8") as f:
			content = yaml.safe_load(f)
			if content is None:  # Empty file
				return {}
			if not isinstance(content, dict):
				msg = f"File {file_path} does not contain a valid YAML dictionary"
				raise yaml.YAMLError(msg)
			return content

	def _load_config(self) -> AppConfigSchema:
		"""
		Load configuration from file and parse it into AppConfigSchema.

		Raises:
			ConfigParsingError: If the configuration file cannot be read or parsed.

		"""
		file_config_dict: dict[str, Any] = {}
		if self._resolved_config_file is None:
			logger.info("No configuration file found. Using default configuration.")
		elif not self._resolved_config_file.exists():
			logger.info("Configuration file not found: %s. Using default configuration.", self._resolved_config_file)
		else:
			try:
				file_config_dict = self._parse_yaml_file(self._resolved_config_file)
				logger.info("Loaded configuration from %s", self._resolved_config_file)
			except yaml.YAMLError as e:
				msg = f"Configuration file {self._resolved_config_file} does not contain a valid YAML dictionary."
				logger.exception(msg)
				raise ConfigParsingError(msg) from e
			except OSError as e:
				msg = f"Error accessing configuration file {self._resolved_config_file}: {e}"
				logger.exception(msg)
				raise ConfigParsingError(msg) from e

		try:
			return AppConfigSchema(**file_config_dict)
		except ValueError as e:  # pydantic ValidationError
			msg = f"Error parsing configuration into schema: {e}"
			logger.exception(msg)
			raise ConfigParsingError(msg) from e

	@property
	def get(self) -> AppConfigSchema:
		"""Get the current application configuration."""
		return self._app_config
