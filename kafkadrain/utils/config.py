"""
Configuration management for kafkadrain.

Handles loading and merging configuration from:
- Built-in defaults
- A configuration file (explicit, or the first default location found)
- Environment variables
- Command-line arguments
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


DEFAULT_CONFIG: Dict[str, Any] = {
    "zookeeper": {
        "hosts": "localhost:2181",
        "timeout": 10.0,
    },
    "logging": {
        "level": "WARNING",
        "format": "console",
        "output": "stderr",
    },
}

DEFAULT_CONFIG_PATHS: List[Path] = [
    Path("~/.kafkadrain.yaml").expanduser(),
    Path("/etc/kafkadrain.yaml"),
]

# Environment variable -> dotted config key
ENV_OVERRIDES = {
    "ZK_HOSTS": "zookeeper.hosts",
    "LOG_LEVEL": "logging.level",
}


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""
    pass


class Config:
    """Configuration manager for kafkadrain."""
    
    def __init__(
        self,
        config_file: Optional[str] = None,
        search_paths: Optional[List[Path]] = None,
    ):
        """
        Initialize configuration.
        
        Args:
            config_file: Path to configuration file. If None, the first
                existing file among the search paths is used.
            search_paths: Default file locations (defaults to
                ~/.kafkadrain.yaml and /etc/kafkadrain.yaml)
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self.source: Optional[str] = None
        
        if config_file:
            self._load_config_file(config_file)
        else:
            self._load_default_config(
                DEFAULT_CONFIG_PATHS if search_paths is None else search_paths
            )
        
        self._apply_env_overrides()
    
    def _load_default_config(self, search_paths: List[Path]) -> None:
        """Load the first configuration file found in the search paths."""
        for path in search_paths:
            if path.exists():
                self._load_config_file(str(path))
                return
    
    def _load_config_file(self, config_file: str) -> None:
        """
        Load configuration from YAML file.
        
        Args:
            config_file: Path to YAML configuration file
        
        Raises:
            ConfigError: If the file is unreadable, not valid YAML, or
                contains unknown sections
        """
        try:
            with open(config_file, "r") as f:
                file_config = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Could not read configuration file: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse configuration file: {e}") from e
        
        if file_config is None:
            file_config = {}
        if not isinstance(file_config, dict):
            raise ConfigError(
                f"Invalid configuration file: {config_file} must contain a mapping"
            )
        
        unknown = sorted(set(file_config) - set(DEFAULT_CONFIG))
        if unknown:
            raise ConfigError(
                f"Invalid configuration file: unknown section(s) {', '.join(unknown)}"
            )
        
        self._merge_config(file_config)
        self.source = config_file
    
    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        """
        Deep merge new configuration into existing configuration.
        
        Args:
            new_config: Configuration dictionary to merge
        """
        self._config = self._deep_merge(self._config, new_config)
    
    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two dictionaries.
        
        Args:
            base: Base dictionary
            override: Override dictionary
        
        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
    
    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        for env_name, key in ENV_OVERRIDES.items():
            if value := os.getenv(env_name):
                self.set(key, value)
    
    def merge_options(self, options: Dict[str, Any]) -> None:
        """
        Merge command-line options, ignoring unset (None) values.
        
        Args:
            options: Map of dotted config key to option value
        """
        for key, value in options.items():
            if value is not None:
                self.set(key, value)
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.
        
        Args:
            key: Configuration key in dot notation (e.g., "zookeeper.hosts")
            default: Default value if key not found
        
        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
    
    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.
        
        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Get entire configuration as dictionary.
        
        Returns:
            Configuration dictionary
        """
        return copy.deepcopy(self._config)
