"""Data models for the stream supervisor."""

from stream_supervisor.models.process import (
    Exited,
    ExitOutcome,
    Killed,
    ProcessExit,
    exit_from_returncode,
)
from stream_supervisor.models.progress import ProgressReport

__all__ = [
    # Progress
    "ProgressReport",
    # Process
    "Exited",
    "ExitOutcome",
    "Killed",
    "ProcessExit",
    "exit_from_returncode",
]
