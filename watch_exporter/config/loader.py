"""Configuration loader with YAML parsing and environment variable substitution."""

import yaml
import os
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import ExporterConfig


class ConfigurationError(Exception):
    """Configuration file is missing, unparseable or invalid."""


class ConfigLoader:
    """Load and validate exporter configuration."""

    @staticmethod
    def load_from_file(config_path: str) -> ExporterConfig:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ExporterConfig: Validated configuration object

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML,
                or fails validation
        """
        config_file = Path(config_path)
        if not config_file.is_file():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                raw_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read {config_path}: {e}") from e

        return ConfigLoader.load_from_dict(raw_config, source=config_path)

    @staticmethod
    def load_from_dict(raw_config: Any, source: str = "<dict>") -> ExporterConfig:
        """
        Validate an already parsed configuration mapping.

        Raises:
            ConfigurationError: If the mapping fails validation
        """
        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"{source}: top level must be a mapping")

        raw_config = ConfigLoader._substitute_env_vars(raw_config)

        try:
            return ExporterConfig(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {source}: {e}") from e

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj
