"""
Custom exceptions for the stream supervisor.

This module defines the exception hierarchy used throughout the package.
"""

from typing import Optional


class SupervisorError(Exception):
    """Base exception for all supervisor errors."""

    pass


class ConfigurationError(SupervisorError):
    """Configuration is invalid or missing."""

    pass


class ProcessSpawnError(SupervisorError):
    """The transcoding process could not be created."""

    pass


class StreamExitError(SupervisorError):
    """The transcoding process exited with an error before streaming started."""

    def __init__(self, message: str, code: Optional[int] = None, signal: Optional[str] = None):
        """
        Initialize exit error with termination details.

        Args:
            message: Error message
            code: Exit code of the process (None if killed by a signal)
            signal: Name of the terminating signal (None if the process exited)
        """
        super().__init__(message)
        self.code = code
        self.signal = signal
