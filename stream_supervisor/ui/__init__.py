"""Console output for the stream supervisor."""

from stream_supervisor.ui.reporter import ProgressReporter, format_size

__all__ = [
    "ProgressReporter",
    "format_size",
]
