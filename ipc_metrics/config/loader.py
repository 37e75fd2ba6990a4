"""
Configuration loader for ipc_metrics.

This module handles loading configuration from configuration files and
environment variables.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import GlobalConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    def __init__(self, env_prefix: str = "IPC_METRICS_") -> None:
        """Initialize configuration loader."""
        self.config_paths = [
            Path("ipc_metrics.yaml"),
            Path("ipc_metrics.yml"),
            Path("ipc_metrics.json"),
            Path("config/ipc_metrics.yaml"),
            Path("config/ipc_metrics.yml"),
            Path("config/ipc_metrics.json"),
            Path.home() / ".ipc_metrics" / "config.yaml",
            Path.home() / ".ipc_metrics" / "config.yml",
            Path.home() / ".ipc_metrics" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = env_prefix

    def load_config(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> GlobalConfig:
        """
        Load configuration from all available sources.

        Environment variables take precedence over file values.

        Args:
            config_file: Specific config file to load

        Returns:
            GlobalConfig instance with merged configuration

        Raises:
            ConfigurationError: If a file cannot be parsed or values are invalid
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        try:
            return GlobalConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        if config_file:
            config_path = Path(config_file)
            if config_path.exists():
                return self._parse_config_file(config_path)
            logger.warning("Config file %s not found, using defaults", config_path)
        else:
            for config_path in self.config_paths:
                if config_path.exists():
                    return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigurationError(
                f"Unsupported config file format: {config_path.suffix}",
                path=config_path,
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to parse config file {config_path}: {e}", path=config_path
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping", path=config_path
            )

        logger.debug("Loaded configuration from %s", config_path)
        return data

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            f"{self.env_prefix}LOG_STRUCTURED": ("logging", "enable_structured"),
            # Metrics
            f"{self.env_prefix}ENABLED": ("metrics", "enabled"),
            f"{self.env_prefix}BACKENDS": ("metrics", "backends"),
            f"{self.env_prefix}MAX_POINTS": ("metrics", "max_points"),
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                converted_value = self._convert_env_value(value)

                current = config
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = converted_value

        # Backend lists may hold a single entry
        metrics = config.get("metrics", {})
        if isinstance(metrics.get("backends"), str):
            metrics["backends"] = [metrics["backends"]]

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # List values (comma-separated)
        if "," in value:
            return [item.strip() for item in value.split(",")]

        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def save_config(self, config: GlobalConfig, config_file: Union[str, Path]) -> None:
        """Save configuration to file."""
        config_path = Path(config_file)
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigurationError(
                f"Unsupported config file format: {config_path.suffix}",
                path=config_path,
            )

        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_data = config.model_dump(mode="json")

        with open(config_path, "w", encoding="utf-8") as f:
            if suffix == ".json":
                json.dump(config_data, f, indent=2)
            else:
                yaml.safe_dump(config_data, f, default_flow_style=False, indent=2)


def load_config(config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
    """Load configuration using the default loader."""
    return ConfigLoader().load_config(config_file)
