"""String, path, logging and timing helpers shared by the placer."""

from __future__ import annotations

import math
import os
import sys
import time
from dataclasses import dataclass

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = frozenset("0123456789")


def get_directory(filename: str) -> str:
    """Return the part of *filename* before its last path separator, or ''."""
    found = max(filename.rfind("/"), filename.rfind("\\"))
    if found < 0:
        return ""
    return filename[:found]


def get_basename(filename: str) -> str:
    """Return the part of *filename* after its last path separator."""
    found = max(filename.rfind("/"), filename.rfind("\\"))
    return filename[found + 1:]


def chdir_file(filename: str) -> bool:
    """Change into the directory holding *filename*; return whether that worked."""
    target = get_directory(filename)
    if not target:
        return True
    try:
        os.chdir(target)
    except OSError:
        return False
    return True


def split(s: str, delim: str) -> list[str]:
    """Split *s* on *delim*, dropping a single trailing empty field."""
    if not s:
        return []
    parts = s.split(delim)
    if s.endswith(delim):
        parts.pop()
    return parts


def split_with_escape(s: str, delim: str) -> list[str]:
    """Split *s* on *delim*, joining fields whose delimiter was backslash-escaped."""
    escaped: list[str] = []
    current = ""
    for element in split(s, delim):
        current += element
        if element.endswith("\\"):
            current = current[:-1] + " "
        else:
            escaped.append(current)
            current = ""
    if current:
        escaped.append(current)
    return escaped


def is_numeric(s: str) -> bool:
    """Return True when every character of *s* is an ASCII digit."""
    return all(c in _DIGITS for c in s)


def trim(s: str) -> str:
    """Strip leading and trailing whitespace."""
    return s.strip(_WHITESPACE)


def deg2rad(a: float) -> float:
    """Convert degrees to radians."""
    return a * math.pi / 180.0


def rad2deg(a: float) -> float:
    """Convert radians to degrees."""
    return a * 180.0 / math.pi


@dataclass
class _LogState:
    verbose: int = 0
    progress: bool = False


_state = _LogState()


def increase_verbose_level() -> None:
    """Raise the verbosity by one step."""
    _state.verbose += 1


def verbose_level() -> int:
    """Return the current verbosity."""
    return _state.verbose


def enable_progress_logging() -> None:
    """Turn on progress reports."""
    _state.progress = True


def _emit(message: str) -> None:
    sys.stderr.write(message)
    sys.stderr.flush()


def log_info(message: str) -> None:
    """Write *message* to stderr when verbose mode is on."""
    if _state.verbose >= 1:
        _emit(message)


def log_error(message: str) -> None:
    """Write *message* to stderr unconditionally."""
    _emit(message)


def log_progress(kind: str, value: int, max_value: int) -> None:
    """Report progress on stderr when progress logging is enabled."""
    if _state.progress:
        _emit(f"Progress:{kind}:{int(value)}:{int(max_value)}\n")


def ms_sleep(ms: float) -> None:
    """Sleep for *ms* milliseconds."""
    time.sleep(ms / 1000.0)