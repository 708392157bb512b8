"""Shared utilities: errors and logging."""

from stream_supervisor.utils.errors import (
    ConfigurationError,
    ProcessSpawnError,
    StreamExitError,
    SupervisorError,
)
from stream_supervisor.utils.logger import SessionLogger, get_logger, setup_logger

__all__ = [
    # Errors
    "ConfigurationError",
    "ProcessSpawnError",
    "StreamExitError",
    "SupervisorError",
    # Logging
    "SessionLogger",
    "get_logger",
    "setup_logger",
]
