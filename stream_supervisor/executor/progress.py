"""
Parser for the transcoder's machine-readable progress output.

FFmpeg started with ``-progress pipe:1`` periodically writes blocks of
``key=value`` lines to stdout. A block starts with ``frame=`` and ends with
``progress=continue`` or ``progress=end``.
"""

import re
from typing import Optional, Union

from ..models import ProgressReport

PROGRESS_PREFIX = "frame="

LINE_SPLIT_PATTERN = re.compile(r"\r\n|\r|\n")

# Leading numeric prefix; tolerates unit suffixes such as "kbits/s" and "x"
INT_PATTERN = re.compile(r"\s*([-+]?\d+)")
FLOAT_PATTERN = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def _parse_int(value: str) -> int:
    match = INT_PATTERN.match(value)
    if not match:
        raise ValueError(f"Not an integer: {value!r}")
    return int(match.group(1))


def _parse_float(value: str) -> float:
    match = FLOAT_PATTERN.match(value)
    if not match:
        raise ValueError(f"Not a number: {value!r}")
    return float(match.group(1))


def parse_progress(data: Union[bytes, str]) -> Optional[ProgressReport]:
    """
    Parse one progress block into a report.

    Parsing is all-or-nothing: a block missing any field, or carrying a
    value that is not numeric where a number is expected, yields None.

    Args:
        data: Raw stdout chunk

    Returns:
        ProgressReport, or None if the chunk is not a complete progress block
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data

    if not text.startswith(PROGRESS_PREFIX):
        return None

    values: dict[str, str] = {}
    for line in LINE_SPLIT_PATTERN.split(text):
        key, sep, value = line.partition("=")
        if sep:
            values[key] = value

    try:
        return ProgressReport(
            frame=_parse_int(values["frame"]),
            fps=_parse_float(values["fps"]),
            stream_q=_parse_float(values["stream_0_0_q"]),
            bitrate=_parse_float(values["bitrate"]),
            total_size=_parse_int(values["total_size"]),
            out_time_us=_parse_int(values["out_time_us"]),
            out_time=values["out_time"].strip(),
            dup_frames=_parse_int(values["dup_frames"]),
            drop_frames=_parse_int(values["drop_frames"]),
            speed=_parse_float(values["speed"]),
            progress=values["progress"].strip(),
        )
    except (KeyError, ValueError):
        return None
