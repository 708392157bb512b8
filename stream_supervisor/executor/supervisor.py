"""
Process supervisor for a streaming transcoder.

This module runs one transcoding process per streaming session, relays its
output into the session log, and reports its termination to the host through
a delegate and a one-shot ready callback.
"""

import asyncio
import codecs
import logging
import os
import re
import time
from typing import Callable, Optional, Protocol, Sequence

from ..config import SupervisorConfig
from ..models import ExitOutcome, ProcessExit, ProgressReport, exit_from_returncode
from ..utils import ProcessSpawnError, SessionLogger, StreamExitError, get_logger
from .progress import LINE_SPLIT_PATTERN, PROGRESS_PREFIX, parse_progress

logger = get_logger(__name__)

# Exit code FFmpeg reports when it was interrupted by a signal
KILLED_EXIT_CODE = 255

QUIT_COMMAND = b"q"

READ_CHUNK_SIZE = 4096


class StreamingDelegate(Protocol):
    """Host callbacks for tearing down a streaming session."""

    def stop_stream(self, session_id: str) -> None: ...

    def force_stop_stream(self, session_id: str) -> None: ...


class ReadyCallback(Protocol):
    """One-shot notification that the stream is alive, or failed to start."""

    def __call__(self, error: Optional[Exception] = None) -> None: ...


def classify_startup_latency(seconds: float, config: SupervisorConfig) -> int:
    """
    Map the time to the first frames onto a log level.

    Args:
        seconds: Time between launch and the first report with frames
        config: Supervisor configuration holding the thresholds

    Returns:
        logging.DEBUG, logging.WARNING or logging.ERROR
    """
    if seconds < config.startup_warning_seconds:
        return logging.DEBUG
    if seconds < config.startup_error_seconds:
        return logging.WARNING
    return logging.ERROR


def classify_exit(status: ProcessExit, stop_requested: bool, killed: bool) -> ExitOutcome:
    """
    Classify a process termination.

    Args:
        status: How the process terminated
        stop_requested: Whether stop() armed the kill timer
        killed: Whether the supervisor sent the kill signal

    Returns:
        Semantic exit outcome
    """
    if stop_requested and status.code == 0:
        return ExitOutcome.EXPECTED
    if status.code is None or status.code == KILLED_EXIT_CODE:
        return ExitOutcome.FORCED if killed else ExitOutcome.UNEXPECTED
    return ExitOutcome.ERROR


class ProcessSupervisor:
    """
    Supervisor for one transcoding process.

    Construction schedules the process launch on the running event loop and
    returns immediately. From then on the supervisor:
    - Parses progress blocks from stdout and logs the startup latency once
    - Relays stderr lines to the session log when debugging
    - Classifies the process exit and notifies the delegate
    - Escalates stop() to a forced kill after the configured timeout
    """

    STDERR_ERROR_PATTERN = re.compile(r"\[(panic|fatal|error)\]")

    def __init__(
        self,
        label: str,
        session_id: str,
        executable: str,
        args: Sequence[str],
        log: SessionLogger,
        delegate: StreamingDelegate,
        callback: Optional[ReadyCallback] = None,
        debug: bool = False,
        *,
        config: Optional[SupervisorConfig] = None,
        progress_callback: Optional[Callable[[ProgressReport], None]] = None,
    ):
        """
        Initialize the supervisor and launch the process.

        Must be called from within a running event loop.

        Args:
            label: Human-readable session label (e.g. camera name)
            session_id: Identifier of the streaming session
            executable: Transcoder executable path
            args: Command-line arguments for the transcoder
            log: Logger bound to the session
            delegate: Host callbacks for stopping the session
            callback: One-shot ready callback
            debug: Relay transcoder stderr to the log
            config: Timeouts and thresholds (defaults if None)
            progress_callback: Called with every parsed progress report
        """
        self.label = label
        self.session_id = session_id
        self.executable = executable
        self.args = list(args)
        self.log = log
        self.delegate = delegate
        self.debug = debug
        self.config = config or SupervisorConfig()
        self.progress_callback = progress_callback

        self._callback = callback
        self._process: Optional[asyncio.subprocess.Process] = None
        self._kill_timer: Optional[asyncio.TimerHandle] = None
        self._killed = False
        self._started = False
        self._exit_status: Optional[ProcessExit] = None
        self._outcome: Optional[ExitOutcome] = None

        self.log.debug(f"Stream command: {executable} {' '.join(self.args)}", force=debug)

        self._start_time = time.monotonic()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> Optional[ProcessExit]:
        try:
            self._process = await asyncio.create_subprocess_exec(
                self.executable,
                *self.args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=os.environ,
            )
        except OSError as e:
            self._handle_spawn_error(e)
            return None

        logger.debug(f"Spawned {self.executable} (pid {self._process.pid}) for {self.session_id}")

        # stop() was called before the process existed
        if self._kill_timer is not None:
            self._send_quit()

        # Exit is handled only after both streams are drained
        await asyncio.gather(
            self._watch_stdout(self._process.stdout),
            self._watch_stderr(self._process.stderr),
        )
        returncode = await self._process.wait()

        status = self._handle_exit(exit_from_returncode(returncode))

        if self._process.stdin is not None:
            self._process.stdin.close()

        return status

    async def _read_lines(self, stream: Optional[asyncio.StreamReader]):
        """
        Stream decoded lines until EOF.

        Lines end at "\\r\\n", "\\n" or a bare "\\r", which FFmpeg uses for
        its stats line.

        Yields:
            Individual lines without their line ending
        """
        if stream is None:
            return

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        buffer = ""
        skip_lf = False

        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break

            text = decoder.decode(chunk)
            if not text:
                continue

            # "\r\n" split across two reads ends only one line
            if skip_lf and text.startswith("\n"):
                text = text[1:]

            buffer += text
            skip_lf = buffer.endswith("\r")

            *lines, buffer = LINE_SPLIT_PATTERN.split(buffer)
            for line in lines:
                yield line

        buffer += decoder.decode(b"", final=True)
        if buffer:
            yield buffer

    async def _watch_stdout(self, stream: Optional[asyncio.StreamReader]) -> None:
        block: list[str] = []

        async for line in self._read_lines(stream):
            if line.startswith(PROGRESS_PREFIX):
                block = []
            block.append(line)

            if line.startswith("progress="):
                self._handle_progress("\n".join(block))
                block = []

    async def _watch_stderr(self, stream: Optional[asyncio.StreamReader]) -> None:
        async for line in self._read_lines(stream):
            self._handle_stderr_line(line)

    def _take_callback(self) -> Optional[ReadyCallback]:
        callback, self._callback = self._callback, None
        return callback

    def _handle_progress(self, block: str) -> None:
        report = parse_progress(block)
        if report is None:
            return

        if not self._started and report.frame > 0:
            self._started = True
            runtime = round(time.monotonic() - self._start_time, 3)
            message = f"Getting the first frames took {runtime} seconds."

            level = classify_startup_latency(runtime, self.config)
            if level == logging.DEBUG:
                self.log.debug(message, force=self.debug)
            elif level == logging.WARNING:
                self.log.warning(message)
            else:
                self.log.error(message)

        if self.progress_callback:
            try:
                self.progress_callback(report)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")

    def _handle_stderr_line(self, line: str) -> None:
        # The first stderr output proves the pipeline is running
        callback = self._take_callback()
        if callback:
            callback()

        if self.debug and self.STDERR_ERROR_PATTERN.search(line):
            self.log.error(line)
        elif self.debug:
            self.log.debug(line, force=True)

    def _handle_spawn_error(self, error: OSError) -> None:
        self.log.error(f"FFmpeg process creation failed: {error}")

        callback = self._take_callback()
        if callback:
            callback(ProcessSpawnError("FFmpeg process creation failed"))

        self.delegate.stop_stream(self.session_id)

    def _handle_exit(self, status: ProcessExit) -> ProcessExit:
        stop_requested = self._kill_timer is not None
        if self._kill_timer is not None:
            self._kill_timer.cancel()

        outcome = classify_exit(status, stop_requested, self._killed)
        self._exit_status = status
        self._outcome = outcome

        message = f"FFmpeg exited with code: {status.code} and signal: {status.signal_name}"

        if not outcome.is_error:
            self.log.debug(f"{message} ({outcome.value})", force=self.debug)
        elif outcome == ExitOutcome.UNEXPECTED:
            self.log.error(f"{message} ({outcome.value})")
        else:
            self.log.error(f"{message} ({outcome.value})")
            self.delegate.stop_stream(self.session_id)

            if not self._started and self._callback is not None:
                callback = self._take_callback()
                callback(StreamExitError(message, code=status.code, signal=status.signal_name))
            else:
                self.delegate.force_stop_stream(self.session_id)

        return status

    def _send_quit(self) -> None:
        if self._process is None or self._process.stdin is None:
            return
        self._process.stdin.write(QUIT_COMMAND + os.linesep.encode())

    def _force_kill(self) -> None:
        if self._process is None or self._process.returncode is not None:
            return

        logger.debug(f"Killing {self.executable} (pid {self._process.pid}) for {self.session_id}")
        try:
            self._process.kill()
        except ProcessLookupError:
            # Exited between the returncode check and the signal
            return
        self._killed = True

    def stop(self) -> None:
        """
        Ask the process to quit, killing it if it is still running after
        the configured timeout.

        Not guarded against repeated calls: each call writes another quit
        command and arms another timer.
        """
        self._send_quit()
        self._kill_timer = asyncio.get_running_loop().call_later(
            self.config.kill_timeout, self._force_kill
        )

    async def wait(self) -> Optional[ProcessExit]:
        """
        Wait until supervision is finished.

        Returns:
            How the process terminated, or None if it could not be created
        """
        return await self._task

    @property
    def stdin(self) -> Optional[asyncio.StreamWriter]:
        """Get the process stdin for writing control bytes."""
        return self._process.stdin if self._process else None

    @property
    def started(self) -> bool:
        """Check if the first frames have been produced."""
        return self._started

    @property
    def killed(self) -> bool:
        """Check if the supervisor sent the kill signal."""
        return self._killed

    @property
    def stop_requested(self) -> bool:
        return self._kill_timer is not None

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> Optional[int]:
        """Get process return code."""
        return self._process.returncode if self._process else None

    @property
    def exit_status(self) -> Optional[ProcessExit]:
        return self._exit_status

    @property
    def outcome(self) -> Optional[ExitOutcome]:
        """Get the exit classification once the process has terminated."""
        return self._outcome
