"""
Configuration management for the stream supervisor.

Configuration is read from YAML: an explicit file, else the first existing
default location, else the built-in defaults of SupervisorConfig.
"""

from pathlib import Path
from typing import Any, Optional

import yaml

from stream_supervisor.config.models import SupervisorConfig
from stream_supervisor.utils import ConfigurationError, get_logger

logger = get_logger(__name__)


class ConfigManager:
    """Locates, reads and writes supervisor configuration files."""

    DEFAULT_CONFIG_LOCATIONS = [
        Path.home() / ".stream-supervisor.yaml",
        Path.home() / ".config" / "stream-supervisor" / "config.yaml",
        Path.cwd() / ".stream-supervisor.yaml",
    ]

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path
        self._config: Optional[SupervisorConfig] = None

    @property
    def config(self) -> SupervisorConfig:
        """Get the configuration, loading it on first access."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def find_config_file(self) -> Optional[Path]:
        """Get the first default location that exists, if any."""
        return next((p for p in self.DEFAULT_CONFIG_LOCATIONS if p.exists()), None)

    def load(self, config_path: Optional[Path] = None) -> SupervisorConfig:
        """
        Load configuration.

        Args:
            config_path: File to read (overrides the manager's own path)

        Returns:
            Validated SupervisorConfig

        Raises:
            ConfigurationError: If an explicit file is missing, or any file
                read is not a valid configuration
        """
        path = config_path or self.config_path

        if path is None:
            path = self.find_config_file()
            if path is None:
                logger.debug("No configuration file found, using defaults")
                return SupervisorConfig()
            logger.info(f"Loading configuration from {path}")
        elif not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        return self._parse(path, self._read_yaml(path))

    def _read_yaml(self, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration: {e}")

    def _parse(self, path: Path, data: Any) -> SupervisorConfig:
        if data is None:
            raise ConfigurationError(f"Configuration file is empty: {path}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {path}")

        try:
            config = SupervisorConfig(**data)
        except ValueError as e:
            raise ConfigurationError(f"Failed to load configuration: {e}")

        logger.debug(f"Loaded configuration from {path}")
        return config

    def save(self, path: Path, config: Optional[SupervisorConfig] = None) -> None:
        """
        Write configuration as YAML, creating parent directories.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        data = (config or self.config).model_dump(mode="json")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

        logger.info(f"Configuration saved to {path}")

    def init_default_config(self, path: Optional[Path] = None, force: bool = False) -> Path:
        """
        Write a configuration file holding the defaults.

        Args:
            path: Target file (first default location if None)
            force: Overwrite an existing file

        Returns:
            Path of the written file

        Raises:
            ConfigurationError: If the file exists and force is False
        """
        target = path or self.DEFAULT_CONFIG_LOCATIONS[0]

        if target.exists() and not force:
            raise ConfigurationError(
                f"Configuration file already exists: {target}. Use --force to overwrite."
            )

        self.save(target, SupervisorConfig())
        return target
