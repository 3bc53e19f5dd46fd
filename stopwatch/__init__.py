"""Elapsed-time stopwatch with laps, resume and duration-string serialization."""

from .core.duration import ParseError, format_duration, parse_duration
from .core.stopwatch import Stopwatch, StopwatchEncoder

__all__ = [
    "ParseError",
    "Stopwatch",
    "StopwatchEncoder",
    "format_duration",
    "parse_duration",
]
