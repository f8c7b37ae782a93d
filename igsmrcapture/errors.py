"""Error reporting helpers: log a message, then return, raise or abort."""

from __future__ import annotations

import logging
import os
import sys

log = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """A fatal error that is not tied to a failed system call."""


class SysCallError(CaptureError):
    """A fatal error reported after a failed system call."""

    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


def _current_errno() -> int:
    exc = sys.exc_info()[1]
    if isinstance(exc, OSError) and exc.errno is not None:
        return exc.errno
    return 0


def _report(with_errno: bool, fmt: str, args: tuple) -> tuple[str, int]:
    message = fmt % args if args else fmt
    code = _current_errno()
    if with_errno:
        message = f"{message}: {os.strerror(code)}"
    log.error(message)
    return message, code


def err_ret(fmt, *args):
    """Log a non-fatal error related to a system call."""
    _report(True, fmt, args)


def err_sys(fmt, *args):
    """Log a fatal error related to a system call and raise SysCallError."""
    message, code = _report(True, fmt, args)
    raise SysCallError(message, code)


def err_dump(fmt, *args):
    """Log a fatal error related to a system call and abort the process."""
    _report(True, fmt, args)
    os.abort()
    raise SystemExit(1)


def err_msg(fmt, *args):
    """Log a non-fatal error unrelated to a system call."""
    _report(False, fmt, args)


def err_quit(fmt, *args):
    """Log a fatal error unrelated to a system call and raise CaptureError."""
    message, _ = _report(False, fmt, args)
    raise CaptureError(message)