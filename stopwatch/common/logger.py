import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from stopwatch.common.setup import SETTINGS

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

def get_logger(
        name = "stopwatch",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
        stream = None
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Setup persistent handler, only when somewhere to put it has actually been configured
    persistent_handler_name = f"{name}:persistent"
    if persistent and log_dir is not None and not any(h.get_name() == persistent_handler_name for h in logger.handlers):
        log_dir.mkdir(parents=True,exist_ok=True)
        persistent_handler = RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=True,
        )
        persistent_handler.setLevel(level)
        persistent_handler.setFormatter(fmt)
        persistent_handler.set_name(persistent_handler_name)
        logger.addHandler(persistent_handler)

    # Setup console handler (stderr unless told otherwise)
    console_handler_name = f"{name}:console"
    if console and not any(h.get_name() == console_handler_name for h in logger.handlers):
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(level)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        logger.addHandler(console_handler)

    # Nothing configured at all, keep logging's last-resort handler from kicking in.
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger

log = get_logger(level=SETTINGS.log_level,log_dir=SETTINGS.log_dir,console=SETTINGS.log_console)
