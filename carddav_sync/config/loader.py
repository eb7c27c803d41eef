"""
Configuration loader module for CardDAV synchronization.

Provides YAML-based configuration file loading with support for:
- Loading configuration from default or custom paths
- Graceful handling of missing configuration files
- Validation of configuration keys and value types
- Building the Account to sync from the loaded settings
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from carddav_sync.exceptions import CardDAVSyncError
from carddav_sync.sync.collection import VALID_SYNC_METHODS
from carddav_sync.sync.models import Account, Credentials
from carddav_sync.utils.paths import resolve_config_dir

# Default configuration file name
DEFAULT_CONFIG_FILE = "config.yaml"

logger = logging.getLogger(__name__)


class ConfigError(CardDAVSyncError):
    """Raised when configuration loading or validation fails."""

    pass


# Valid configuration keys and their expected types
VALID_KEYS: dict[str, type[Any] | tuple[type[Any], ...]] = {
    # Server options
    "root_url": str,
    "home_url": str,
    "username": str,
    "password": str,
    "password_env": str,
    # Sync options
    "sync_method": str,
    "max_workers": int,
    "request_timeout": (int, float),
    # Logging options
    "verbose": bool,
    "log_dir": str,
    "log_retention_count": int,
}


class ConfigLoader:
    """
    YAML configuration file loader.

    Attributes:
        config_dir: Directory containing the configuration file
        config_file: Name of the configuration file

    Usage:
        loader = ConfigLoader()
        config = loader.load_and_validate()

        # Load from specific file
        config = loader.load_from_file("/path/to/config.yaml")
    """

    def __init__(
        self, config_dir: Path | None = None, config_file: str = DEFAULT_CONFIG_FILE
    ):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing the configuration file.
                       Defaults to ~/.carddav-sync/ or $CARDDAV_SYNC_CONFIG_DIR
            config_file: Name of the configuration file (default: config.yaml)
        """
        self.config_dir = resolve_config_dir(config_dir)
        self.config_file = config_file

    def _get_config_path(self) -> Path:
        return self.config_dir / self.config_file

    def load(self) -> dict[str, Any]:
        """
        Load configuration from the default configuration file.

        Returns:
            Configuration values, or an empty dict if the file doesn't exist

        Raises:
            ConfigError: If the file exists but cannot be parsed
        """
        return self.load_from_file(self._get_config_path())

    def load_from_file(self, path: Path | str) -> dict[str, Any]:
        """
        Load configuration from a specific file.

        Returns an empty dict if the file doesn't exist, allowing
        graceful operation with CLI defaults.

        Raises:
            ConfigError: If the configuration file exists but cannot be parsed
        """
        path = Path(path)

        if not path.exists():
            logger.debug(f"Configuration file not found: {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                config = yaml.safe_load(f)

            if config is None:
                logger.debug(f"Configuration file is empty: {path}")
                return {}

            if not isinstance(config, dict):
                raise ConfigError(
                    f"Configuration file must contain a YAML dictionary, "
                    f"got {type(config).__name__}"
                )

            logger.debug(f"Loaded configuration from {path}")
            return config

        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML configuration file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file: {e}") from e

    def validate(self, config: dict[str, Any]) -> None:
        """
        Validate configuration structure and values.

        Unknown keys are ignored.

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ConfigError(
                f"Configuration must be a dictionary, got {type(config).__name__}"
            )

        for key, value in config.items():
            if key not in VALID_KEYS:
                continue
            expected_type = VALID_KEYS[key]
            # bool is an int subclass; reject it for numeric options
            if isinstance(value, bool) and expected_type is not bool:
                is_valid = False
            else:
                is_valid = isinstance(value, expected_type)
            if not is_valid:
                if isinstance(expected_type, tuple):
                    type_name = " or ".join(t.__name__ for t in expected_type)
                else:
                    type_name = expected_type.__name__
                raise ConfigError(
                    f"Invalid type for '{key}': expected {type_name}, "
                    f"got {type(value).__name__}"
                )

        if "sync_method" in config and config["sync_method"] not in VALID_SYNC_METHODS:
            raise ConfigError(
                f"Invalid sync_method '{config['sync_method']}'. "
                f"Must be one of: {', '.join(sorted(VALID_SYNC_METHODS))}"
            )

        if "max_workers" in config and config["max_workers"] < 1:
            raise ConfigError(f"max_workers must be >= 1, got {config['max_workers']}")

        if "request_timeout" in config and config["request_timeout"] <= 0:
            raise ConfigError(
                f"request_timeout must be > 0, got {config['request_timeout']}"
            )

        if "log_retention_count" in config and config["log_retention_count"] < 0:
            raise ConfigError(
                f"log_retention_count must be >= 0, "
                f"got {config['log_retention_count']}"
            )

        for key in ("root_url", "home_url"):
            if key in config and not config[key].startswith(("http://", "https://")):
                raise ConfigError(f"{key} must be an http(s) URL, got {config[key]}")

    def load_and_validate(self) -> dict[str, Any]:
        """
        Load configuration and validate it.

        Raises:
            ConfigError: If configuration cannot be loaded or is invalid
        """
        config = self.load()
        if config:
            self.validate(config)
        return config


def account_from_config(config: dict[str, Any]) -> Account:
    """
    Build the Account to sync from validated configuration.

    The password comes from `password`, or from the environment variable
    named by `password_env`. home_url defaults to root_url.

    Raises:
        ConfigError: If root_url is missing or password_env names an unset variable
    """
    root_url = config.get("root_url")
    if not root_url:
        raise ConfigError("root_url is required; run 'carddav-sync init-config'")

    credentials = None
    username = config.get("username")
    if username:
        password = config.get("password", "")
        password_env = config.get("password_env")
        if password_env:
            if password_env not in os.environ:
                raise ConfigError(
                    f"Environment variable {password_env} (password_env) is not set"
                )
            password = os.environ[password_env]
        credentials = Credentials(username=username, password=password)

    return Account(
        root_url=root_url,
        home_url=config.get("home_url") or root_url,
        credentials=credentials,
    )
