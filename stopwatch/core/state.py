"""Stopwatch states. Exactly one of these is held by a Stopwatch at any time."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Reset:
    """Never started, or reset since. Elapsed reads as zero."""


@dataclass
class Running:
    """Counting.

    ``mono_start`` and ``last_lap`` are monotonic-clock readings in seconds;
    ``started_at`` is the wall-clock equivalent of ``mono_start``, for display only.
    """

    mono_start: float
    started_at: datetime
    last_lap: float
    laps: list[timedelta] = field(default_factory=list)


@dataclass
class Stopped:
    """Frozen. ``since_lap`` is how much running time had passed since the last lap boundary."""

    accumulated: timedelta
    started_at: datetime
    since_lap: timedelta
    laps: list[timedelta] = field(default_factory=list)
