"""Configuration management with YAML and environment variable support."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from peppol_lookup.data.schemas import Config

logger = logging.getLogger(__name__)

# Default config file path
DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"


class ConfigManager:
    """Manages configuration loading from YAML files and environment variables."""

    # Mapping of environment variables to config fields
    ENV_MAPPINGS = {
        "PEPPOL_LOOKUP_BASE_URL": "base_url",
        "PEPPOL_LOOKUP_TIMEOUT": "timeout_seconds",
        "PEPPOL_LOOKUP_RETRY_AFTER": "default_retry_after",
        "PEPPOL_LOOKUP_MAX_RETRIES": "max_rate_limit_retries",
        "PEPPOL_LOOKUP_BATCH_SIZE": "batch_size",
        "PEPPOL_LOOKUP_OUTPUT_FORMAT": "output_format",
        "PEPPOL_LOOKUP_OUTPUT_DIR": "output_directory",
    }

    # Nested YAML location of each config field
    YAML_KEYS = {
        ("directory", "base_url"): "base_url",
        ("directory", "timeout"): "timeout_seconds",
        ("rate_limit", "default_retry_after"): "default_retry_after",
        ("rate_limit", "max_retries"): "max_rate_limit_retries",
        ("lookup", "batch_size"): "batch_size",
        ("output", "format"): "output_format",
        ("output", "directory"): "output_directory",
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the config manager.

        Args:
            config_path: Path to YAML config file. Uses default if not provided.
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Optional[Config] = None

    def load(self) -> Config:
        """Load configuration from file and environment variables.

        Returns:
            Config object with merged configuration.
        """
        config_dict: dict[str, Any] = {}

        if self.config_path.exists():
            config_dict = self._load_yaml()
            logger.debug(f"Loaded config from: {self.config_path}")
        else:
            logger.debug(f"Config file not found: {self.config_path}, using defaults")

        config_dict = self._apply_env_overrides(config_dict)

        self._config = Config(**config_dict)
        return self._config

    def _load_yaml(self) -> dict[str, Any]:
        """Load and flatten the nested YAML configuration."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Error loading config file: {e}")
            return {}

        if not isinstance(raw_config, dict):
            logger.warning(f"Ignoring config file without a mapping at top level: {self.config_path}")
            return {}

        config_dict: dict[str, Any] = {}
        for (section, key), field in self.YAML_KEYS.items():
            values = raw_config.get(section)
            if isinstance(values, dict) and key in values:
                config_dict[field] = values[key]

        return config_dict

    def _apply_env_overrides(self, config_dict: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config.

        Args:
            config_dict: Current configuration dictionary.

        Returns:
            Updated configuration dictionary.
        """
        for env_var, config_key in self.ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is not None:
                # Parse value based on expected type
                if config_key in ("timeout_seconds", "default_retry_after"):
                    config_dict[config_key] = float(value)
                elif config_key in ("max_rate_limit_retries", "batch_size"):
                    config_dict[config_key] = int(value)
                else:
                    config_dict[config_key] = value
                logger.debug(f"Override from env: {env_var} -> {config_key}")

        return config_dict

    @property
    def config(self) -> Config:
        """Get the current configuration, loading if needed."""
        if self._config is None:
            self.load()
        return self._config  # type: ignore

    def reload(self) -> Config:
        """Reload configuration from file and environment."""
        self._config = None
        return self.load()

    def save(self, config: Config, path: Optional[str] = None) -> None:
        """Save configuration to a YAML file.

        Args:
            config: Configuration to save.
            path: Path to save to (uses self.config_path if not provided).
        """
        save_path = Path(path) if path else self.config_path

        yaml_config: dict[str, dict[str, Any]] = {}
        for (section, key), field in self.YAML_KEYS.items():
            yaml_config.setdefault(section, {})[key] = getattr(config, field)

        with open(save_path, "w", encoding="utf-8") as f:
            yaml.dump(yaml_config, f, default_flow_style=False, allow_unicode=True)

        logger.info(f"Saved configuration to: {save_path}")
