"""
carddav_sync.config - Configuration management module

Contains configuration loading, validation, and default settings.
"""

from carddav_sync.config.generator import generate_default_config, save_config_file
from carddav_sync.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    ConfigLoader,
    account_from_config,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "DEFAULT_CONFIG_FILE",
    "account_from_config",
    "generate_default_config",
    "save_config_file",
]
