"""
Stream Supervisor

Supervises the transcoding process of a single streaming session: launches
it, parses its progress output, and classifies how it terminates.
"""

__version__ = "0.1.0"

from stream_supervisor.config import SupervisorConfig
from stream_supervisor.executor import (
    ProcessSupervisor,
    StreamingDelegate,
    parse_progress,
)
from stream_supervisor.models import (
    Exited,
    ExitOutcome,
    Killed,
    ProcessExit,
    ProgressReport,
)
from stream_supervisor.utils import (
    ConfigurationError,
    ProcessSpawnError,
    SessionLogger,
    StreamExitError,
    SupervisorError,
    get_logger,
    setup_logger,
)

__all__ = [
    "__version__",
    # Supervision
    "ProcessSupervisor",
    "StreamingDelegate",
    "SupervisorConfig",
    "parse_progress",
    # Models
    "Exited",
    "ExitOutcome",
    "Killed",
    "ProcessExit",
    "ProgressReport",
    # Utils
    "ConfigurationError",
    "ProcessSpawnError",
    "SessionLogger",
    "StreamExitError",
    "SupervisorError",
    "get_logger",
    "setup_logger",
]
