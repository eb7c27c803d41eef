"""
Configuration file generator for CardDAV synchronization.

Writes a default configuration file with every option documented.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def generate_default_config() -> str:
    """
    Generate default YAML configuration with all options documented.

    Returns:
        String containing YAML configuration with comments
    """
    return """# CardDAV Sync Configuration
# ==========================
#
# Save as ~/.carddav-sync/config.yaml (or pass --config-file).
# CLI arguments always override these values.

# Server
# ------

# Server root; hrefs returned by the server are resolved against it
root_url: https://dav.example.com/

# Address book home set (defaults to root_url)
# home_url: https://dav.example.com/addressbooks/jane/

# Basic-auth credentials. Prefer password_env over a plain password.
# username: jane
# password_env: CARDDAV_SYNC_PASSWORD


# Sync Behavior
# -------------

# How address books are synced
# Options:
#   - auto: sync-collection when the server supports it, ctag otherwise
#   - basic: always compare ctags and refetch changed books completely
#   - webdav: always use sync-collection (falls back to basic if rejected)
# Default: auto
# sync_method: auto

# Address books synced in parallel
# Default: 4
# max_workers: 4

# Per-request timeout in seconds
# Default: 30
# request_timeout: 30


# Logging Options
# ---------------

# Enable verbose output with detailed logging
# Default: false
# verbose: false

# Directory for log files
# Default: ~/.carddav-sync/logs
# log_dir: /path/to/logs

# Number of log files to keep (0 keeps all)
# Default: 10
# log_retention_count: 10
"""


def save_config_file(
    config_path: Path, overwrite: bool = False
) -> tuple[bool, str | None]:
    """
    Save default configuration file to specified path.

    Args:
        config_path: Path where the config file should be saved
        overwrite: If True, overwrite existing file. If False, fail if file exists.

    Returns:
        (True, None) on success, (False, error_message) on failure
    """
    try:
        config_path = config_path.expanduser().resolve()

        if config_path.exists() and not overwrite:
            return (
                False,
                f"Configuration file already exists: {config_path}\n"
                "Use --force to overwrite.",
            )

        config_path.parent.mkdir(parents=True, mode=0o700, exist_ok=True)
        config_path.write_text(generate_default_config(), encoding="utf-8")

        # May hold credentials: readable/writable by owner only
        config_path.chmod(0o600)

        logger.info(f"Created configuration file: {config_path}")
        return (True, None)

    except OSError as e:
        error_msg = f"Failed to create configuration file: {e}"
        logger.error(error_msg)
        return (False, error_msg)
