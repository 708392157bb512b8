"""
Tests for configuration system.
"""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from stream_supervisor.config import ConfigManager, SupervisorConfig
from stream_supervisor.utils import ConfigurationError


class TestSupervisorConfig:
    """Test SupervisorConfig model."""

    def test_defaults(self):
        """Test default configuration values."""
        config = SupervisorConfig()

        assert config.executable == "ffmpeg"
        assert config.kill_timeout == 2.0
        assert config.startup_warning_seconds == 5.0
        assert config.startup_error_seconds == 22.0
        assert config.debug is False
        assert config.log_level == "INFO"

    def test_log_level_normalized(self):
        """Test that log level names are upper-cased."""
        config = SupervisorConfig(log_level="debug")
        assert config.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            SupervisorConfig(log_level="verbose")

    def test_kill_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            SupervisorConfig(kill_timeout=0)

    def test_threshold_order(self):
        """Test that the error threshold must exceed the warning threshold."""
        with pytest.raises(ValidationError, match="startup_error_seconds"):
            SupervisorConfig(startup_warning_seconds=10.0, startup_error_seconds=10.0)


class TestConfigManager:
    """Test ConfigManager."""

    def test_load_default(self):
        """Test loading defaults when no file exists."""
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = [Path(tmpdir) / "a.yaml", Path(tmpdir) / "b.yaml"]
            with patch.object(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", missing):
                config = ConfigManager().load()

        assert config == SupervisorConfig()

    def test_save_and_load(self):
        """Test saving and loading configuration."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "nested" / "config.yaml"

            manager = ConfigManager()
            manager.save(config_path, SupervisorConfig(kill_timeout=3.5, debug=True))

            loaded = ConfigManager(config_path).config
            assert loaded.kill_timeout == 3.5
            assert loaded.debug is True

    def test_load_from_default_location(self):
        """Test that the first existing default location is used."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".stream-supervisor.yaml"
            config_path.write_text("executable: /opt/ffmpeg/bin/ffmpeg\n")

            with patch.object(
                ConfigManager, "DEFAULT_CONFIG_LOCATIONS", [Path(tmpdir) / "x.yaml", config_path]
            ):
                config = ConfigManager().load()

        assert config.executable == "/opt/ffmpeg/bin/ffmpeg"

    def test_missing_file(self):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigManager(Path("/nonexistent/config.yaml")).load()

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            config_path.write_text("")

            with pytest.raises(ConfigurationError, match="empty"):
                ConfigManager(config_path).load()

    def test_invalid_yaml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            config_path.write_text("kill_timeout: [1, 2\n")

            with pytest.raises(ConfigurationError, match="Invalid YAML"):
                ConfigManager(config_path).load()

    def test_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            config_path.write_text("kill_timeout: -1\n")

            with pytest.raises(ConfigurationError, match="Failed to load configuration"):
                ConfigManager(config_path).load()

    def test_init_default_config(self):
        """Test creating and refusing to overwrite a default config."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            manager = ConfigManager()

            assert manager.init_default_config(config_path) == config_path
            assert "kill_timeout: 2.0" in config_path.read_text()

            with pytest.raises(ConfigurationError, match="already exists"):
                manager.init_default_config(config_path)

            manager.init_default_config(config_path, force=True)

    def test_config_loaded_once(self):
        """Test that the config property caches the first load."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            config_path.write_text("kill_timeout: 1.0\n")

            manager = ConfigManager(config_path)
            assert manager.config.kill_timeout == 1.0

            config_path.write_text("kill_timeout: 4.0\n")
            assert manager.config.kill_timeout == 1.0
            assert manager.load().kill_timeout == 4.0

    def test_non_mapping_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            config_path.write_text("- ffmpeg\n- avconv\n")

            with pytest.raises(ConfigurationError, match="mapping"):
                ConfigManager(config_path).load()

    def test_find_config_file(self):
        """Test that only existing default locations are returned."""
        with tempfile.TemporaryDirectory() as tmpdir:
            present = Path(tmpdir) / "present.yaml"
            present.write_text("debug: true\n")
            missing = Path(tmpdir) / "missing.yaml"

            with patch.object(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", [missing, present]):
                assert ConfigManager().find_config_file() == present

            with patch.object(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", [missing]):
                assert ConfigManager().find_config_file() is None
