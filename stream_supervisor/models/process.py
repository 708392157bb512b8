"""
Data models for process termination.

This module contains the tagged exit result of a supervised process and the
semantic outcomes it is classified into.
"""

import signal
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Exited:
    """Process exited on its own with an exit code."""

    code: int

    @property
    def signal_name(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class Killed:
    """Process was terminated by a signal."""

    signal: int

    @property
    def code(self) -> Optional[int]:
        return None

    @property
    def signal_name(self) -> Optional[str]:
        """Get the signal name (e.g. "SIGKILL"), or the number if unknown."""
        try:
            return signal.Signals(self.signal).name
        except ValueError:
            return str(self.signal)


ProcessExit = Union[Exited, Killed]


def exit_from_returncode(returncode: int) -> ProcessExit:
    """
    Build a termination result from an asyncio return code.

    Negative return codes mean the process was killed by that signal.

    Args:
        returncode: Return code reported by the subprocess

    Returns:
        Exited or Killed result
    """
    if returncode < 0:
        return Killed(signal=-returncode)
    return Exited(code=returncode)


class ExitOutcome(str, Enum):
    """Semantic classification of a process termination."""

    EXPECTED = "Expected"  # Clean exit after a stop request
    FORCED = "Forced"  # Killed by the supervisor
    UNEXPECTED = "Unexpected"  # Killed by someone else
    ERROR = "Error"  # Exited with a failure code

    @property
    def is_error(self) -> bool:
        return self in (ExitOutcome.UNEXPECTED, ExitOutcome.ERROR)
