import logging
import os
from pathlib import Path
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Turns an env-style flag into a bool, erroring out on anything we don't recognize.
def _parse_flag(name, raw, default):
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise RuntimeError(f"Invalid value for {name}: {raw!r} (expected one of {sorted(_TRUTHY | _FALSY)})")

# Same idea for logging levels, accepts either names (DEBUG, info) or raw numbers.
def _parse_level(name, raw, default):
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise RuntimeError(f"Invalid value for {name}: {raw!r} (expected a logging level name)")
    return level

# Dataclass for accessing runtime settings across the package.
@dataclass(frozen=False)
class Settings:

    log_level: int
    log_dir: Path | None
    log_console: bool

    @staticmethod
    def build(environ=None):
        environ = os.environ if environ is None else environ

        log_level = _parse_level("STOPWATCH_LOG_LEVEL", environ.get("STOPWATCH_LOG_LEVEL"), logging.INFO)
        log_console = _parse_flag("STOPWATCH_LOG_CONSOLE", environ.get("STOPWATCH_LOG_CONSOLE"), True)

        # Persistent logging is opt-in, a library shouldn't be dropping files wherever it's imported.
        log_dir = None
        raw_dir = environ.get("STOPWATCH_LOG_DIR")
        if raw_dir:
            log_dir = ensure_directory(Path(raw_dir).expanduser())

        return Settings(
            log_level = log_level,
            log_dir = log_dir,
            log_console = log_console
        )
SETTINGS = Settings.build()
