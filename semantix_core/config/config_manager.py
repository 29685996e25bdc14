"""
Centralized Configuration Management System

Settings are layered, later sources overriding earlier ones:
- Built-in defaults (the dataclasses below)
- config.yaml / config.json in the config directory
- environments/config.<env>.yaml / .json for the active environment
- SEMANTIX_* environment variables
"""

import json
import logging
import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from semantix_core.exceptions import ConfigValidationError


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: LogLevel = LogLevel.WARNING
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json_format: bool = False


@dataclass
class StoreConfig:
    """Document store configuration"""

    shard_count: int = 16


@dataclass
class SearchConfig:
    """Search configuration"""

    default_top_n: int = 5
    skip_incompatible: bool = False


@dataclass
class PersistenceConfig:
    """JSON persistence configuration"""

    data_path: str = "./data/documents.json"
    pretty_print: bool = True


@dataclass
class AppConfig:
    """Main application configuration"""

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)


class ConfigManager:
    """
    Centralized configuration manager with support for:
    - Environment-specific configurations
    - Configuration validation
    - Dynamic configuration updates
    """

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    ENV_MAPPINGS = {
        "SEMANTIX_ENVIRONMENT": ("environment", lambda x: Environment(x.lower())),
        "SEMANTIX_DEBUG": ("debug", _parse_bool),
        # Logging
        "SEMANTIX_LOG_LEVEL": ("logging.level", lambda x: LogLevel(x.upper())),
        "SEMANTIX_LOG_FORMAT": ("logging.format", str),
        "SEMANTIX_LOG_JSON": ("logging.json_format", _parse_bool),
        # Store
        "SEMANTIX_SHARD_COUNT": ("store.shard_count", int),
        # Search
        "SEMANTIX_DEFAULT_TOP_N": ("search.default_top_n", int),
        "SEMANTIX_SKIP_INCOMPATIBLE": ("search.skip_incompatible", _parse_bool),
        # Persistence
        "SEMANTIX_DATA_PATH": ("persistence.data_path", str),
        "SEMANTIX_PRETTY_PRINT": ("persistence.pretty_print", _parse_bool),
    }

    def __new__(cls, *args, **kwargs):
        """Singleton pattern implementation"""
        if not cls._instance:
            with cls._lock:
                if not cls._instance:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        # Avoid re-initialization in singleton
        if hasattr(self, "_initialized"):
            return

        self._initialized = True
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(os.getenv("SEMANTIX_CONFIG_DIR", "config"))

        self.config: AppConfig = AppConfig()
        self.loaded_files = []
        self.logger = logging.getLogger(__name__)

        self._load_configuration()

    def _load_configuration(self):
        """Load configuration from multiple sources in priority order"""
        self.config = AppConfig()
        self.loaded_files = []

        self._load_from_file("config.yaml")
        self._load_from_file("config.json")

        env = os.getenv("SEMANTIX_ENVIRONMENT", "development").lower()
        self._load_from_file(f"environments/config.{env}.yaml")
        self._load_from_file(f"environments/config.{env}.json")

        self._load_from_environment()

        self._validate_configuration()

    def _load_from_file(self, filename: str):
        """Load configuration from YAML/JSON file"""
        file_path = self.config_dir / filename
        if not file_path.exists():
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if filename.endswith(".yaml") or filename.endswith(".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            self.logger.warning(f"Failed to load configuration from {filename}: {e}")
            return

        if data:
            self._update_config_from_dict(data)
            self.loaded_files.append(str(file_path))
            self.logger.info(f"Loaded configuration from {filename}")

    def _load_from_environment(self):
        """Load configuration from environment variables"""
        for env_var, (config_path, converter) in self.ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    self._set_nested_attr(self.config, config_path, converter(value))
                except (ValueError, TypeError) as e:
                    self.logger.warning(f"Invalid value for {env_var}: {value}, error: {e}")

    def _update_config_from_dict(self, data: Dict[str, Any], prefix: str = ""):
        """Update configuration from dictionary recursively"""
        for key, value in data.items():
            config_path = f"{prefix}.{key}" if prefix else key

            if isinstance(value, dict):
                self._update_config_from_dict(value, config_path)
                continue

            try:
                if config_path == "environment" and isinstance(value, str):
                    value = Environment(value.lower())
                elif config_path == "logging.level" and isinstance(value, str):
                    value = LogLevel(value.upper())

                self._set_nested_attr(self.config, config_path, value)
            except AttributeError:
                self.logger.warning(f"Unknown configuration key: {config_path}")
            except ValueError as e:
                self.logger.warning(f"Invalid value for {config_path}: {value}, error: {e}")

    def _set_nested_attr(self, obj: Any, path: str, value: Any):
        """Set nested attribute using dot notation"""
        parts = path.split(".")
        for part in parts[:-1]:
            obj = getattr(obj, part)
        if not hasattr(obj, parts[-1]):
            raise AttributeError(path)
        setattr(obj, parts[-1], value)

    def _validate_configuration(self):
        """Validate configuration settings"""
        errors = []

        if not isinstance(self.config.store.shard_count, int) or self.config.store.shard_count < 1:
            errors.append("store.shard_count must be a positive integer")

        if (
            not isinstance(self.config.search.default_top_n, int)
            or self.config.search.default_top_n < 0
        ):
            errors.append("search.default_top_n must be a non-negative integer")

        if not self.config.persistence.data_path:
            errors.append("persistence.data_path is required")

        if not isinstance(self.config.logging.level, LogLevel):
            errors.append(f"logging.level must be one of {[level.value for level in LogLevel]}")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.debug("Configuration validation passed")

    def reload_configuration(self):
        """Reload configuration from all sources"""
        self._load_configuration()
        self.logger.info("Configuration reloaded successfully")

    def get(self, path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        try:
            obj = self.config
            for part in path.split("."):
                obj = getattr(obj, part)
            return obj
        except AttributeError:
            return default

    def set(self, path: str, value: Any):
        """Set configuration value using dot notation"""
        self._set_nested_attr(self.config, path, value)
        self._validate_configuration()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""

        def _asdict_recursive(obj):
            if hasattr(obj, "__dict__"):
                result = {}
                for key, value in obj.__dict__.items():
                    if isinstance(value, Enum):
                        result[key] = value.value
                    elif hasattr(value, "__dict__"):
                        result[key] = _asdict_recursive(value)
                    else:
                        result[key] = value
                return result
            return obj

        return _asdict_recursive(self.config)

    def save_to_file(self, filename: str, format: str = "yaml"):
        """Save current configuration to file"""
        file_path = self.config_dir / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        config_dict = self.to_dict()

        with open(file_path, "w", encoding="utf-8") as f:
            if format.lower() == "yaml":
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
            else:
                json.dump(config_dict, f, indent=2)

        self.logger.info(f"Configuration saved to {filename}")

    def get_index_config(self) -> Dict[str, Any]:
        """
        Get the settings needed to build a VectorIndex.

        Returns:
            Dictionary with shard_count, skip_incompatible and pretty_print keys
        """
        return {
            "shard_count": self.config.store.shard_count,
            "skip_incompatible": self.config.search.skip_incompatible,
            "pretty_print": self.config.persistence.pretty_print,
        }


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration manager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def init_config(config_dir: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize the global configuration manager"""
    global _config_manager
    ConfigManager._instance = None
    _config_manager = ConfigManager(config_dir)
    return _config_manager
