"""
Data model for transcoder progress reports.

A report is a snapshot parsed from one ``-progress`` block written by the
transcoding process to its standard output.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressReport:
    """Snapshot of transcoding progress."""

    frame: int
    fps: float
    stream_q: float
    bitrate: float
    total_size: int
    out_time_us: int
    out_time: str
    dup_frames: int
    drop_frames: int
    speed: float
    progress: str

    @property
    def is_end(self) -> bool:
        """Check if this is the final report of the run."""
        return self.progress == "end"
