"""
CLI interface for the stream supervisor.

This module provides the command-line interface using Typer and Rich for
supervising a transcoder run and inspecting its progress output.
"""

import asyncio
import signal
import sys
import uuid
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigManager, SupervisorConfig
from ..executor import ProcessSupervisor, parse_progress
from ..models import Exited
from ..ui import ProgressReporter
from ..utils import ConfigurationError, SessionLogger, SupervisorError, setup_logger

app = typer.Typer(
    name="stream-supervisor",
    help="Supervise an FFmpeg streaming process and report its progress",
    add_completion=False,
)

# Console for rich output
console = Console()


class ConsoleDelegate:
    """Streaming delegate that reports teardown requests on the console."""

    def __init__(self, console: Console):
        self.console = console
        self.stop_requests: list[str] = []
        self.force_stop_requests: list[str] = []

    def stop_stream(self, session_id: str) -> None:
        self.stop_requests.append(session_id)
        self.console.print(f"[yellow]⚠ Stop requested for session {session_id}[/yellow]")

    def force_stop_stream(self, session_id: str) -> None:
        self.force_stop_requests.append(session_id)
        self.console.print(f"[red]✗ Forced stop requested for session {session_id}[/red]")


def _ready(error: Optional[Exception] = None) -> None:
    if error is None:
        console.print("[green]✓[/green] Stream pipeline is running")
    else:
        console.print(f"[bold red]✗ Stream failed to start:[/bold red] {error}")


def _exit_code(supervisor: ProcessSupervisor) -> int:
    """Map a finished supervisor onto a shell exit code."""
    if supervisor.outcome is not None and not supervisor.outcome.is_error:
        return 0
    # A transcoder that finished its input on its own succeeded
    if supervisor.exit_status == Exited(code=0):
        return 0
    return 1


def _load_config(config_file: Optional[Path]) -> SupervisorConfig:
    return ConfigManager(config_file).config


async def _run_async(
    executable: str,
    args: List[str],
    label: str,
    session_id: str,
    debug: bool,
    config: SupervisorConfig,
) -> int:
    """
    Async implementation of the run command.
    """
    reporter = ProgressReporter(console)
    delegate = ConsoleDelegate(console)
    log = SessionLogger(label, debug_mode=debug)

    supervisor = ProcessSupervisor(
        label,
        session_id,
        executable,
        args,
        log,
        delegate,
        callback=_ready,
        debug=debug,
        config=config,
        progress_callback=reporter.display_status,
    )

    # Ctrl-C asks the transcoder to quit instead of tearing down the loop
    loop = asyncio.get_running_loop()
    if sys.platform != "win32":
        loop.add_signal_handler(signal.SIGINT, supervisor.stop)

    try:
        await supervisor.wait()
    finally:
        if sys.platform != "win32":
            loop.remove_signal_handler(signal.SIGINT)

    if supervisor.outcome is not None:
        console.print(f"[cyan]Process finished:[/cyan] {supervisor.outcome.value}")

    return _exit_code(supervisor)


@app.command(
    "run",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def run_command(
    args: Optional[List[str]] = typer.Argument(
        None,
        help="Arguments passed to the transcoder (use -- before them)",
    ),
    executable: Optional[str] = typer.Option(
        None,
        "--executable",
        "-e",
        help="Transcoder executable (default: from config, ffmpeg)",
    ),
    label: str = typer.Option("stream", "--label", "-l", help="Session label used in logs"),
    session_id: Optional[str] = typer.Option(
        None,
        "--session-id",
        help="Session identifier (default: random UUID)",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Relay transcoder stderr to the log"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="Custom configuration file",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[Path] = typer.Option(None, "--log", help="Log file path"),
) -> None:
    """
    Run the transcoder under supervision until it exits.

    Progress reports are printed as they arrive. Press Ctrl-C to ask the
    transcoder to quit; it is killed if it does not exit in time.
    """
    try:
        config = _load_config(config_file)
    except ConfigurationError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    debug = debug or config.debug
    setup_logger(
        level="DEBUG" if debug else config.log_level,
        log_file=log_file,
        verbose=verbose,
        console=Console(stderr=True),
    )

    try:
        code = asyncio.run(
            _run_async(
                executable=executable or config.executable,
                args=args or [],
                label=label,
                session_id=session_id or str(uuid.uuid4()),
                debug=debug,
                config=config,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Supervision cancelled by user[/yellow]")
        sys.exit(130)
    except SupervisorError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)

    sys.exit(code)


@app.command("parse")
def parse_command(
    input_file: Optional[Path] = typer.Argument(
        None,
        exists=True,
        dir_okay=False,
        readable=True,
        help="File holding one progress block (default: stdin)",
    ),
) -> None:
    """
    Parse an FFmpeg progress block and display it.
    """
    data = input_file.read_bytes() if input_file else sys.stdin.buffer.read()

    report = parse_progress(data)
    if report is None:
        console.print("[red]✗ Input is not a complete progress block[/red]")
        sys.exit(1)

    ProgressReporter(console).display(report)


@app.command("init-config")
def init_config_command(
    output: Path = typer.Argument(
        Path(".stream-supervisor.yaml"),
        help="Configuration file to create",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Create a default configuration file.
    """
    try:
        ConfigManager().init_default_config(output, force=force)
    except ConfigurationError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Created config file: {output}")


@app.command("version")
def version_command() -> None:
    """
    Display version information.
    """
    from .. import __version__

    console.print(
        Panel.fit(
            f"[bold cyan]Stream Supervisor[/bold cyan]\n[dim]Version {__version__}[/dim]",
            border_style="cyan",
        )
    )


def main() -> None:
    """
    Main entry point for CLI.
    """
    app()


if __name__ == "__main__":
    main()
