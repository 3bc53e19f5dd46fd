import json
import threading
import time
from datetime import timedelta
from stopwatch.common.logger import log
from stopwatch.core.duration import format_duration, parse_duration
from stopwatch.core.state import Reset, Running, Stopped
from stopwatch.util import ZERO_INSTANT, format_stamp, now_local

# This object handles elapsed time tracking for a single session. Arithmetic runs on a monotonic clock (clock change
# immunity), the wall-clock start is only kept around for display.
#
# Not thread-safe. The delayed-start timer is the only thing that ever touches an instance from another thread, and
# callers sharing one instance between threads need to serialize access themselves.
class Stopwatch:

    # Starts out reset. `logger` is where log() writes (package logger by default), `clock` returns monotonic seconds.
    def __init__(self, logger=None, clock=None):
        self._log = logger or log
        self._clock = clock or time.monotonic
        self._state = Reset()

    #region === Construction ===

    # A stopwatch that's already running.
    @classmethod
    def started(cls, **kwargs):
        watch = cls(**kwargs)
        watch._begin()
        return watch

    # A stopwatch that starts itself once `delay` (timedelta or seconds) has passed. It reads as reset until then.
    @classmethod
    def after(cls, delay, **kwargs):
        watch = cls(**kwargs)
        seconds = delay.total_seconds() if isinstance(delay, timedelta) else float(delay)
        timer = threading.Timer(max(0.0, seconds), watch._begin)
        timer.daemon = True
        timer.start()
        watch._log.debug(f"Scheduled stopwatch start in {seconds} seconds")
        return watch

    # Builds a fresh stopwatch out of a serialized elapsed time, see unmarshal_json().
    @classmethod
    def from_json(cls, data, **kwargs):
        watch = cls(**kwargs)
        watch.unmarshal_json(data)
        return watch

    # Fresh running session: start and lap boundary at now, no laps.
    def _begin(self):
        now = self._clock()
        self._state = Running(mono_start=now, started_at=now_local(), last_lap=now)
        self._log.debug(f"Started stopwatch at mono {now}")

    #endregion === Construction ===

    #region === State ===

    def _is_stopped(self):
        return isinstance(self._state, Stopped)

    def _is_reset(self):
        return isinstance(self._state, Reset)

    # Returns how much time has been clocked. Frozen while stopped, zero while reset.
    def elapsed_time(self):
        state = self._state
        if self._is_stopped():
            return state.accumulated
        if self._is_reset():
            return timedelta(0)
        return timedelta(seconds=self._clock() - state.mono_start)

    # Starts a new session from reset, or resumes a stopped one where it left off. Does nothing while running.
    def start(self):
        state = self._state
        if self._is_reset():
            self._begin()
        elif self._is_stopped():
            # Backdate start and the lap boundary so the stopped interval doesn't count toward either
            now = self._clock()
            self._state = Running(
                mono_start=now - state.accumulated.total_seconds(),
                started_at=now_local() - state.accumulated,
                last_lap=now - state.since_lap.total_seconds(),
                laps=state.laps,
            )
            self._log.debug(f"Resumed stopwatch at mono {now} with {format_duration(state.accumulated)} accumulated")

    # Freezes the elapsed time. Only a running stopwatch can be stopped, anything else is left alone, so a second
    # stop() keeps the first stop time rather than moving it to now.
    def stop(self):
        state = self._state
        if isinstance(state, Running):
            now = self._clock()
            self._state = Stopped(
                accumulated=timedelta(seconds=now - state.mono_start),
                started_at=state.started_at,
                since_lap=timedelta(seconds=now - state.last_lap),
                laps=state.laps,
            )
            self._log.debug(f"Stopped stopwatch at mono {now}")

    # Back to 0 with no laps. Needs a start() to be useful again.
    def reset(self):
        self._state = Reset()
        self._log.debug("Reset stopwatch")

    #endregion === State ===

    #region === Laps ===

    # Records a lap and returns the time since the previous lap boundary (the session start for the first one).
    # Stopped or reset stopwatches have no lap to take: zero comes back and nothing is recorded.
    def lap(self):
        state = self._state
        if self._is_stopped() or self._is_reset():
            return timedelta(0)

        now = self._clock()
        split = timedelta(seconds=now - state.last_lap)
        state.last_lap = now
        state.laps.append(split)
        return split

    # All laps recorded this session, oldest first.
    def laps(self):
        return tuple(getattr(self._state, "laps", ()))

    #endregion === Laps ===

    #region === Reporting ===

    def _message(self, label):
        return f"{label} - elapsed: {format_duration(self.elapsed_time())}"

    # Writes "<label> - elapsed: <elapsed>" to stdout (or `file`). Write failures get logged, never raised.
    def print(self, label, file=None):
        try:
            print(self._message(label), file=file)
        except (OSError, ValueError):
            self._log.warning(f"Couldn't print elapsed time for '{label}'", exc_info=True)

    # Same message as print(), sent through this stopwatch's logger instead.
    def log(self, label):
        self._log.info(self._message(label))

    def __str__(self):
        started_at = getattr(self._state, "started_at", ZERO_INSTANT)
        return (f"[start: {format_stamp(started_at)} current: {format_stamp(now_local())} "
                f"elapsed: {format_duration(self.elapsed_time())}]")

    def __repr__(self):
        return f"<Stopwatch {type(self._state).__name__.lower()} elapsed={format_duration(self.elapsed_time())}>"

    #endregion === Reporting ===

    #region === Serialization ===

    # The elapsed time as a JSON string, e.g. "72h3m0.5s".
    def marshal_json(self):
        return json.dumps(format_duration(self.elapsed_time()), ensure_ascii=False)

    # Restores elapsed time from a (quoted) duration string. The stopwatch ends up running with its start backdated
    # by the parsed duration, so elapsed_time() right afterwards matches what was saved. Laps already recorded are
    # kept. Raises ParseError, leaving the stopwatch untouched, if the duration can't be parsed.
    def unmarshal_json(self, data):
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        elapsed = parse_duration(data.replace('"', ""))

        now = self._clock()
        state = self._state
        seconds = elapsed.total_seconds()
        self._state = Running(
            mono_start=now - seconds,
            started_at=now_local() - elapsed,
            last_lap=state.last_lap if isinstance(state, Running) else now - seconds,
            laps=list(getattr(state, "laps", [])),
        )
        self._log.debug(f"Restored stopwatch with {format_duration(elapsed)} elapsed")

    #endregion === Serialization ===

    # `with Stopwatch() as sw:` runs the stopwatch for the duration of the block.
    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


# Lets json.dumps() handle stopwatches nested anywhere in a structure, encoded as their elapsed time.
class StopwatchEncoder(json.JSONEncoder):

    def default(self, o):
        if isinstance(o, Stopwatch):
            return format_duration(o.elapsed_time())
        return super().default(o)
