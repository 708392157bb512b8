"""Process execution and supervision."""

from stream_supervisor.executor.progress import parse_progress
from stream_supervisor.executor.supervisor import (
    ProcessSupervisor,
    ReadyCallback,
    StreamingDelegate,
    classify_exit,
    classify_startup_latency,
)

__all__ = [
    "ProcessSupervisor",
    "ReadyCallback",
    "StreamingDelegate",
    "classify_exit",
    "classify_startup_latency",
    "parse_progress",
]
