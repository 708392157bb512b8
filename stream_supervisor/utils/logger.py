"""
Logging utilities with Rich integration.

This module provides logging setup for console and file output, and the
session-bound logger handed to each process supervisor.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "stream_supervisor"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Setup logger with Rich handler and optional file output.

    Features:
    - Console output with Rich (markup and tracebacks)
    - Optional file logging for debugging
    - Structured log format in files

    Args:
        name: Logger name (use "stream_supervisor" to match package name)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        verbose: Enable verbose output with file paths
        console: Rich console to use (creates new if None)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        markup=True,
        show_time=True,
        show_path=verbose,
        omit_repeated_times=False,
        level=log_level,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(rich_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False

    return logger


# Create default logger
default_logger = setup_logger()


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance.

    Modules call get_logger(__name__), so their loggers are children of the
    "stream_supervisor" logger configured by setup_logger().

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Logger instance that inherits from the package logger
    """
    return logging.getLogger(name)


class SessionLogger:
    """
    Logger bound to one streaming session.

    Every message is prefixed with the session label. Debug messages are
    gated by ``debug_mode`` unless the caller forces them through.
    """

    def __init__(
        self,
        label: str,
        logger: Optional[logging.Logger] = None,
        debug_mode: bool = False,
    ):
        """
        Initialize session logger.

        Args:
            label: Human-readable session label (e.g. camera name)
            logger: Underlying logger (defaults to the session module logger)
            debug_mode: Global debug gate for debug() messages
        """
        self.label = label
        self.logger = logger or get_logger(f"{ROOT_LOGGER_NAME}.session")
        self.debug_mode = debug_mode

    def _log(self, level: int, message: str) -> None:
        # Bracketed ffmpeg tags such as [error] must not be read as Rich markup
        self.logger.log(level, f"[{self.label}] {message}", extra={"markup": False})

    def debug(self, message: str, force: bool = False) -> None:
        if self.debug_mode or force:
            self._log(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._log(logging.INFO, message)

    def warning(self, message: str) -> None:
        self._log(logging.WARNING, message)

    warn = warning

    def error(self, message: str) -> None:
        self._log(logging.ERROR, message)
