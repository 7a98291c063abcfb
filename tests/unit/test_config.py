"""Unit tests for configuration management."""

import pytest

from robotctl.core.config import (
    Config,
    get_default_config,
    load_config,
    save_config,
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep user and system config files out of the tests."""
    monkeypatch.setattr("robotctl.core.config.DEFAULT_CONFIG_FILE", tmp_path / "none.yaml")
    monkeypatch.setattr("robotctl.core.config.SYSTEM_CONFIG_FILE", tmp_path / "none.yaml")
    for var in ("ROBOTCTL_CONFIG", "ROBOTCTL_MODE", "ROBOTCTL_WORK_MODE", "ROBOTCTL_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


class TestConfig:
    """Tests for main Config class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = Config()
        assert config.mode == "manual"
        assert config.work_mode == "async"
        assert config.log_level == "INFO"

    def test_from_dict_empty(self):
        """Test creating config from empty dict uses defaults."""
        config = Config.from_dict({})
        assert config.mode == "manual"
        assert config.work_mode == "async"

    def test_from_dict_custom_values(self):
        """Test creating config from dict with custom values."""
        config = Config.from_dict(
            {"mode": "auto", "work_mode": "sync", "log_level": "DEBUG"}
        )

        assert config.mode == "auto"
        assert config.work_mode == "sync"
        assert config.log_level == "DEBUG"

    def test_from_dict_invalid_mode(self):
        """Test unknown start mode is rejected."""
        with pytest.raises(ValueError, match="Invalid mode"):
            Config.from_dict({"mode": "sometimes"})

    def test_from_dict_invalid_work_mode(self):
        """Test unknown work mode is rejected."""
        with pytest.raises(ValueError, match="Invalid work_mode"):
            Config.from_dict({"work_mode": "later"})

    def test_to_dict(self):
        """Test converting config to dict."""
        data = Config(mode="auto").to_dict()

        assert data == {"mode": "auto", "work_mode": "async", "log_level": "INFO"}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_default_config(self):
        """Test loading config with no file returns defaults."""
        config = load_config()
        assert isinstance(config, Config)
        assert config.mode == "manual"

    def test_load_from_explicit_path(self, tmp_path):
        """Test loading config from explicit path."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
mode: auto
log_level: WARNING
"""
        )
        config = load_config(config_file)
        assert config.mode == "auto"
        assert config.work_mode == "async"
        assert config.log_level == "WARNING"

    def test_load_from_env_path(self, tmp_path, monkeypatch):
        """Test ROBOTCTL_CONFIG points at the config file."""
        config_file = tmp_path / "env.yaml"
        config_file.write_text("work_mode: sync\n")
        monkeypatch.setenv("ROBOTCTL_CONFIG", str(config_file))

        assert load_config().work_mode == "sync"

    def test_env_override_mode(self, monkeypatch):
        """Test ROBOTCTL_MODE environment override."""
        monkeypatch.setenv("ROBOTCTL_MODE", "auto")
        assert load_config().mode == "auto"

    def test_env_override_work_mode(self, monkeypatch):
        """Test ROBOTCTL_WORK_MODE environment override."""
        monkeypatch.setenv("ROBOTCTL_WORK_MODE", "sync")
        assert load_config().work_mode == "sync"

    def test_env_override_invalid_mode_ignored(self, monkeypatch):
        """Test invalid ROBOTCTL_MODE is ignored."""
        monkeypatch.setenv("ROBOTCTL_MODE", "whenever")
        assert load_config().mode == "manual"

    def test_env_override_log_level(self, monkeypatch):
        """Test ROBOTCTL_LOG_LEVEL environment override."""
        monkeypatch.setenv("ROBOTCTL_LOG_LEVEL", "DEBUG")
        assert load_config().log_level == "DEBUG"


class TestSaveConfig:
    """Tests for save_config function."""

    def test_save_config(self, tmp_path):
        """Test saving config to file."""
        config_file = tmp_path / "subdir" / "config.yaml"

        save_config(Config(), config_file)

        assert config_file.exists()
        content = config_file.read_text()
        assert "mode: manual" in content
        assert "work_mode: async" in content

    def test_save_and_load_roundtrip(self, tmp_path):
        """Test config survives save/load roundtrip."""
        original = Config(mode="auto", work_mode="sync", log_level="ERROR")

        config_file = tmp_path / "config.yaml"
        save_config(original, config_file)
        loaded = load_config(config_file)

        assert loaded == original


class TestGetDefaultConfig:
    """Tests for get_default_config function."""

    def test_returns_defaults(self):
        """Test get_default_config returns default values."""
        assert get_default_config() == Config()
