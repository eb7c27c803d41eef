"""
Tests for the config module.

Tests configuration loading, validation, account building and default
config generation.
"""

import os
from unittest.mock import patch

import pytest
import yaml

from carddav_sync.config.generator import generate_default_config, save_config_file
from carddav_sync.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    ConfigLoader,
    account_from_config,
)
from carddav_sync.utils.paths import CONFIG_DIR_ENV_VAR


class TestConfigLoaderInitialization:
    """Tests for ConfigLoader initialization."""

    def test_config_dir_from_environment_variable(self, tmp_path):
        with patch.dict(os.environ, {CONFIG_DIR_ENV_VAR: str(tmp_path)}):
            loader = ConfigLoader()

        assert loader.config_dir == tmp_path.resolve()
        assert loader.config_file == DEFAULT_CONFIG_FILE

    def test_argument_takes_precedence_over_environment(self, tmp_path):
        arg_dir = tmp_path / "arg"
        with patch.dict(os.environ, {CONFIG_DIR_ENV_VAR: str(tmp_path / "env")}):
            loader = ConfigLoader(config_dir=arg_dir)

        assert loader.config_dir == arg_dir.resolve()


class TestConfigLoading:
    """Tests for configuration file loading."""

    @pytest.fixture
    def loader(self, tmp_path):
        """Create a ConfigLoader instance with temp config dir."""
        return ConfigLoader(config_dir=tmp_path)

    def test_load_nonexistent_file_returns_empty_dict(self, loader):
        assert loader.load() == {}

    def test_load_valid_yaml_file(self, loader, tmp_path):
        config_data = {"root_url": "https://dav.example.com/", "max_workers": 2}
        (tmp_path / DEFAULT_CONFIG_FILE).write_text(
            yaml.dump(config_data), encoding="utf-8"
        )

        assert loader.load() == config_data

    def test_load_empty_yaml_file_returns_empty_dict(self, loader, tmp_path):
        (tmp_path / DEFAULT_CONFIG_FILE).write_text("", encoding="utf-8")

        assert loader.load() == {}

    def test_load_invalid_yaml_raises(self, loader, tmp_path):
        (tmp_path / DEFAULT_CONFIG_FILE).write_text(
            "root_url: [unclosed", encoding="utf-8"
        )

        with pytest.raises(ConfigError, match="Failed to parse"):
            loader.load()

    def test_load_non_dict_raises(self, loader, tmp_path):
        (tmp_path / DEFAULT_CONFIG_FILE).write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="YAML dictionary"):
            loader.load()

    def test_load_and_validate_rejects_bad_values(self, loader, tmp_path):
        (tmp_path / DEFAULT_CONFIG_FILE).write_text(
            "sync_method: fastest\n", encoding="utf-8"
        )

        with pytest.raises(ConfigError, match="sync_method"):
            loader.load_and_validate()


class TestConfigValidation:
    """Tests for ConfigLoader.validate."""

    @pytest.fixture
    def loader(self, tmp_path):
        return ConfigLoader(config_dir=tmp_path)

    def test_valid_config(self, loader):
        loader.validate(
            {
                "root_url": "https://dav.example.com/",
                "home_url": "https://dav.example.com/addressbooks/jane/",
                "username": "jane",
                "password_env": "CARDDAV_PASSWORD",
                "sync_method": "webdav",
                "max_workers": 8,
                "request_timeout": 12.5,
                "verbose": True,
                "log_retention_count": 0,
            }
        )

    def test_unknown_keys_ignored(self, loader):
        loader.validate({"color_scheme": "dark"})

    @pytest.mark.parametrize(
        "config, message",
        [
            ({"max_workers": "4"}, "expected int"),
            ({"max_workers": True}, "expected int"),
            ({"request_timeout": "slow"}, "expected int or float"),
            ({"verbose": "yes"}, "expected bool"),
            ({"max_workers": 0}, "max_workers must be >= 1"),
            ({"request_timeout": 0}, "request_timeout must be > 0"),
            ({"log_retention_count": -1}, "log_retention_count"),
            ({"root_url": "ftp://dav.example.com/"}, "http"),
            ({"home_url": "dav.example.com"}, "http"),
        ],
    )
    def test_invalid_values(self, loader, config, message):
        with pytest.raises(ConfigError, match=message):
            loader.validate(config)

    def test_non_dict_rejected(self, loader):
        with pytest.raises(ConfigError):
            loader.validate(["root_url"])


class TestAccountFromConfig:
    """Tests for account_from_config."""

    def test_root_url_required(self):
        with pytest.raises(ConfigError, match="root_url"):
            account_from_config({})

    def test_home_url_defaults_to_root(self):
        account = account_from_config({"root_url": "https://dav.example.com/"})

        assert account.home_url == "https://dav.example.com/"
        assert account.credentials is None
        assert account.address_books == []

    def test_plain_password(self):
        account = account_from_config(
            {
                "root_url": "https://dav.example.com/",
                "home_url": "https://dav.example.com/addressbooks/jane/",
                "username": "jane",
                "password": "secret",
            }
        )

        assert account.home_url == "https://dav.example.com/addressbooks/jane/"
        assert account.credentials.username == "jane"
        assert account.credentials.password == "secret"

    def test_password_from_environment(self, monkeypatch):
        monkeypatch.setenv("CARDDAV_TEST_PASSWORD", "from-env")

        account = account_from_config(
            {
                "root_url": "https://dav.example.com/",
                "username": "jane",
                "password": "ignored",
                "password_env": "CARDDAV_TEST_PASSWORD",
            }
        )

        assert account.credentials.password == "from-env"

    def test_unset_password_env_raises(self, monkeypatch):
        monkeypatch.delenv("CARDDAV_TEST_PASSWORD", raising=False)

        with pytest.raises(ConfigError, match="CARDDAV_TEST_PASSWORD"):
            account_from_config(
                {
                    "root_url": "https://dav.example.com/",
                    "username": "jane",
                    "password_env": "CARDDAV_TEST_PASSWORD",
                }
            )


class TestConfigGenerator:
    """Tests for the default config generator."""

    def test_default_config_is_valid_yaml(self, tmp_path):
        config = yaml.safe_load(generate_default_config())

        ConfigLoader(config_dir=tmp_path).validate(config)
        assert config == {"root_url": "https://dav.example.com/"}

    def test_save_creates_private_file(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"

        success, error = save_config_file(path)

        assert success is True
        assert error is None
        assert path.read_text(encoding="utf-8") == generate_default_config()
        assert path.stat().st_mode & 0o777 == 0o600

    def test_save_refuses_overwrite(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("root_url: https://mine.example.com/\n", encoding="utf-8")

        success, error = save_config_file(path)

        assert success is False
        assert "--force" in error
        assert "mine.example.com" in path.read_text(encoding="utf-8")

    def test_save_overwrite(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("old: true\n", encoding="utf-8")

        success, _ = save_config_file(path, overwrite=True)

        assert success is True
        assert "root_url" in path.read_text(encoding="utf-8")
