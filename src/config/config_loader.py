"""Configuration loader for application settings."""

import json
from pathlib import Path
from typing import Optional

from .rfc2047_config import AppConfig, Rfc2047Config


class ConfigLoader:
    """Load and validate application configuration."""

    DEFAULT_CONFIG_PATHS = [
        Path("~/.mimewords/config.json"),
        Path("config/mimewords.json"),
    ]

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Optional custom config file path
        """
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    def load_app_config(self) -> AppConfig:
        """
        Load application configuration from file.

        Returns:
            AppConfig instance

        Raises:
            ValueError: If the config file is not valid JSON
            ValidationError: If config values are invalid
        """
        if self._config is not None:
            return self._config

        config_paths = [self.config_path] if self.config_path else self.DEFAULT_CONFIG_PATHS

        for config_path in config_paths:
            if config_path and config_path.expanduser().exists():
                with open(config_path.expanduser(), "r", encoding="utf-8") as f:
                    try:
                        config_data = json.load(f)
                    except json.JSONDecodeError as e:
                        raise ValueError(f"Invalid config in {config_path}: {e}")
                self._config = AppConfig(**config_data)
                return self._config

        # Return default config if no file found
        self._config = AppConfig()
        return self._config

    def load_rfc2047_config(self) -> Rfc2047Config:
        """Return the header encoding settings of the loaded configuration."""
        return self.load_app_config().rfc2047

    def reload(self) -> AppConfig:
        """Reload configuration from file."""
        self._config = None
        return self.load_app_config()
