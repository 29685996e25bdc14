from .config_manager import (
    ConfigManager,
    AppConfig,
    get_config,
    init_config,
    ConfigValidationError,
    Environment,
    LogLevel,
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "get_config",
    "init_config",
    "ConfigValidationError",
    "Environment",
    "LogLevel",
]
