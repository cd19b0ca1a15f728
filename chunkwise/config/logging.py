"""Logging setup for hosts embedding the engine. Engine modules only call get_logger."""

import logging
import sys

from chunkwise.config.settings import get_settings

# Attributes every LogRecord has; anything else arrived through extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class KeyValueFormatter(logging.Formatter):
    """Pipe-separated line followed by the record's extra fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if not fields:
            return line
        return line + " | " + " ".join(f"{k}={v}" for k, v in sorted(fields.items()))


def configure_logging(level: str | None = None, logger: logging.Logger | None = None) -> None:
    """Attach a stdout handler to logger (the root logger by default) at the configured or given level."""
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    resolved = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%dT%H:%M:%S"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(KeyValueFormatter(fmt=fmt, datefmt=datefmt))

    target = logger if logger is not None else logging.getLogger()
    target.handlers.clear()
    target.addHandler(handler)
    target.setLevel(resolved)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)
