"""Process control: signal handlers and detaching from the terminal."""

from __future__ import annotations

import os
import signal

from .errors import err_sys


def install_signal(signo, handler):
    """Install a handler for signo and return the previous one.

    Interrupted system calls are restarted. Raises SysCallError when the
    handler cannot be installed.
    """
    try:
        return signal.signal(signo, handler)
    except (OSError, ValueError):
        err_sys("signal error")


def daemon_init():
    """Detach the running process from its controlling terminal.

    Starts a new session, ignores SIGHUP and points stdin, stdout and
    stderr at /dev/null. Returns False, leaving everything untouched, when
    a new session cannot be started; True otherwise.
    """
    try:
        os.setsid()
    except OSError:
        return False

    install_signal(signal.SIGHUP, signal.SIG_IGN)

    null_in = os.open(os.devnull, os.O_RDONLY)
    try:
        os.dup2(null_in, 0)
    finally:
        os.close(null_in)

    null_out = os.open(os.devnull, os.O_RDWR)
    try:
        os.dup2(null_out, 1)
        os.dup2(null_out, 2)
    finally:
        os.close(null_out)
    return True