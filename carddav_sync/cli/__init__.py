"""CLI package for carddav_sync."""

from carddav_sync.cli.main import (
    DEFAULT_CONFIG_FILE,
    build_account,
    cli,
    describe_book,
    get_config_dir,
    get_config_file,
)
from carddav_sync.utils import DEFAULT_CONFIG_DIR

__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_CONFIG_FILE",
    "build_account",
    "cli",
    "describe_book",
    "get_config_dir",
    "get_config_file",
]
