"""Tests for path utilities."""

from pathlib import Path

from carddav_sync.utils.paths import (
    CONFIG_DIR_ENV_VAR,
    DEFAULT_CONFIG_DIR,
    resolve_config_dir,
)


class TestResolveConfigDir:
    """Test resolve_config_dir function."""

    def test_default_config_dir_is_in_home(self):
        assert Path.home() / ".carddav-sync" == DEFAULT_CONFIG_DIR

    def test_explicit_path(self, tmp_path):
        assert resolve_config_dir(str(tmp_path)) == tmp_path.resolve()

    def test_explicit_path_with_tilde(self):
        assert resolve_config_dir("~/books-config") == Path.home() / "books-config"

    def test_env_var_used_without_explicit_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_DIR_ENV_VAR, str(tmp_path))

        assert resolve_config_dir() == tmp_path.resolve()

    def test_explicit_overrides_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_DIR_ENV_VAR, str(tmp_path / "env"))

        result = resolve_config_dir(tmp_path / "explicit")

        assert result == (tmp_path / "explicit").resolve()

    def test_default_without_env_var(self, monkeypatch):
        monkeypatch.delenv(CONFIG_DIR_ENV_VAR, raising=False)

        assert resolve_config_dir() == DEFAULT_CONFIG_DIR.expanduser().resolve()
