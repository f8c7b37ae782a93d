"""File logging with size-limited files, configured once per process."""

from __future__ import annotations

import errno
import logging
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

_MB = 1 << 20
_BACKUPS = 1000
_FORMAT = "%(levelname).1s%(asctime)s.%(msecs)03d %(thread)d %(filename)s:%(lineno)d] %(message)s"
_DATEFMT = "%m%d %H:%M:%S"


@dataclass
class _Settings:
    max_log_size: int = 1800
    stop_if_full_disk: bool = False
    handler: "_LogFileHandler | None" = None
    previous_level: int | None = None

    @property
    def max_bytes(self) -> int:
        size = self.max_log_size if 0 < self.max_log_size < 4096 else 1
        return size * _MB


_settings = _Settings()


class _LogFileHandler(RotatingFileHandler):
    """Rotating handler that can go quiet once the disk is full."""

    def __init__(self, filename, max_bytes):
        super().__init__(filename, maxBytes=max_bytes, backupCount=_BACKUPS, encoding="utf-8")
        self.disk_full = False

    def emit(self, record):
        if not self.disk_full:
            super().emit(record)

    def handleError(self, record):
        exc = sys.exc_info()[1]
        if (
            _settings.stop_if_full_disk
            and isinstance(exc, OSError)
            and exc.errno == errno.ENOSPC
        ):
            self.disk_full = True
            return
        super().handleError(record)


def init_logging(log_dir, program):
    """Send INFO and above to a size-limited file in log_dir; returns its path."""
    shutdown_logging()
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{Path(program).name}.log"
    handler = _LogFileHandler(path, _settings.max_bytes)
    handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
    root = logging.getLogger()
    _settings.previous_level = root.level
    root.setLevel(logging.INFO)
    root.addHandler(handler)
    _settings.handler = handler
    return path


def set_max_log_size(n_mb):
    """Limit each log file to n_mb megabytes (values outside 1..4095 mean 1)."""
    _settings.max_log_size = n_mb
    if _settings.handler is not None:
        _settings.handler.maxBytes = _settings.max_bytes


def get_max_log_size():
    return _settings.max_log_size


def stop_logging_if_full_disk():
    """Stop writing log records once the disk reports it is full."""
    _settings.stop_if_full_disk = True


def is_stop_logging_if_full_disk():
    return _settings.stop_if_full_disk


def shutdown_logging():
    """Detach and close the log file; a call without logging set up does nothing."""
    handler = _settings.handler
    if handler is None:
        return
    root = logging.getLogger()
    root.removeHandler(handler)
    handler.close()
    if _settings.previous_level is not None:
        root.setLevel(_settings.previous_level)
    _settings.handler = None
    _settings.previous_level = None