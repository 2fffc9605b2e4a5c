"""
Configuration management utilities.

This module loads the optional TOML configuration file whose ``[pull]``
section provides defaults for the command line options.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import DEFAULT_CONFIG_PATH


class ConfigManager:
    """
    Manages configuration loading and access.

    An explicitly given configuration file must exist; the default file is
    optional and an absent default yields an empty configuration.
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default path.
        """
        self.explicit = config_path is not None
        self.config_path = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._config: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.

        Returns:
            Dictionary containing configuration data

        Raises:
            FileNotFoundError: If an explicitly given config file doesn't exist
            ValueError: If config file is invalid
        """
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            if self.explicit:
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
            logging.debug("No configuration file at %s, using defaults", self.config_path)
            self._config = {}
            return self._config

        try:
            with open(self.config_path, "rb") as f:
                self._config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in configuration file {self.config_path}: {e}") from e
        except OSError as e:
            raise ValueError(f"Failed to load configuration from {self.config_path}: {e}") from e

        logging.debug("Loaded configuration from %s", self.config_path)
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.

        Supports nested keys using dot notation (e.g., "pull.image_root").

        Args:
            key: Configuration key (supports dot notation for nested keys)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value: Any = self.load()

        for k in key.split("."):
            if not isinstance(value, dict):
                return default
            value = value.get(k)
            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Section name (e.g., "pull")

        Returns:
            Dictionary containing section data, or empty dict if section not found

        Raises:
            ValueError: If the section exists but is not a table
        """
        data = self.get(section, {})
        if not isinstance(data, dict):
            raise ValueError(f"Section [{section}] in {self.config_path} must be a table")
        return data


__all__ = ["ConfigManager"]
