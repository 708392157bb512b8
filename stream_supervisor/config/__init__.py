"""Configuration models and management."""

from stream_supervisor.config.manager import ConfigManager
from stream_supervisor.config.models import SupervisorConfig

__all__ = [
    "ConfigManager",
    "SupervisorConfig",
]
