"""
Console reporting for progress reports.

This module renders parsed progress reports with Rich, either as a table or
as a compact one-line status for live runs.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..models import ProgressReport


def format_size(bytes: int) -> str:
    """
    Format byte count in human-readable format.

    Args:
        bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    size = float(bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} PB"


class ProgressReporter:
    """Reporter for displaying transcoder progress."""

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize progress reporter.

        Args:
            console: Rich console instance (creates new if not provided)
        """
        self.console = console or Console()

    def build_table(self, report: ProgressReport) -> Table:
        """
        Build a table with every field of a report.

        Args:
            report: Parsed progress report

        Returns:
            Rich table with one row per field
        """
        table = Table(title="Transcoder Progress", show_header=True, header_style="bold cyan")
        table.add_column("Field", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Frame", str(report.frame))
        table.add_row("FPS", f"{report.fps:.2f}")
        table.add_row("Quality (q)", f"{report.stream_q:.1f}")
        table.add_row("Bitrate", f"{report.bitrate:.1f} kbit/s")
        table.add_row("Total size", format_size(report.total_size))
        table.add_row("Output time", escape(report.out_time))
        table.add_row("Output time (us)", str(report.out_time_us))
        table.add_row("Duplicated frames", str(report.dup_frames))
        table.add_row("Dropped frames", str(report.drop_frames))
        table.add_row("Speed", f"{report.speed:.2f}x")

        status_style = "green" if report.is_end else "yellow"
        table.add_row("Status", f"[{status_style}]{escape(report.progress)}[/{status_style}]")

        return table

    def format_status(self, report: ProgressReport) -> str:
        """Format a report as a single status line."""
        line = (
            f"frame={report.frame} fps={report.fps:.1f} time={report.out_time} "
            f"bitrate={report.bitrate:.1f}kbit/s speed={report.speed:.2f}x"
        )
        if report.drop_frames or report.dup_frames:
            line += f" dup={report.dup_frames} drop={report.drop_frames}"
        return line

    def display(self, report: ProgressReport) -> None:
        self.console.print(self.build_table(report))

    def display_status(self, report: ProgressReport) -> None:
        self.console.print(self.format_status(report), markup=False, highlight=False)
