"""Conversions between textual and packed socket addresses."""

from __future__ import annotations

import os
import socket

from .errors import err_quit, err_sys

_AF_UNIX = getattr(socket, "AF_UNIX", None)
_NO_PATHNAME = "(no pathname bound)"


def _length(address) -> int:
    try:
        return len(address)
    except TypeError:
        return 0


def inet_pton(family, text):
    """Pack a textual IPv4 or IPv6 address.

    An unsupported family raises SysCallError; a malformed address raises
    CaptureError.
    """
    try:
        return socket.inet_pton(family, text)
    except OSError as exc:
        if exc.errno is None:
            err_quit("inet_pton error for %s", text)
        err_sys("inet_pton error for %s", text)


def inet_ntop(family, packed):
    """Format a packed IPv4 or IPv6 address; raises SysCallError on failure."""
    try:
        return socket.inet_ntop(family, packed)
    except (OSError, ValueError):
        err_sys("inet_ntop error")


def _canonical(family: int, host: str) -> str:
    return inet_ntop(family, inet_pton(family, host))


def sock_ntop(family, address):
    """Describe a socket address as text, e.g. 'host:port' or '[host]:port'.

    A zero port is left out. Unix-domain addresses give their path, or
    '(no pathname bound)' when there is none.
    """
    if family == socket.AF_INET:
        host = _canonical(socket.AF_INET, address[0])
        port = address[1]
        return f"{host}:{port}" if port else host
    if family == socket.AF_INET6:
        host = _canonical(socket.AF_INET6, address[0])
        port = address[1]
        return f"[{host}]:{port}" if port else host
    if _AF_UNIX is not None and family == _AF_UNIX:
        path = os.fsdecode(address) if address else ""
        if not path or path.startswith("\0"):
            return _NO_PATHNAME
        return path
    return f"sock_ntop: unknown AF_xxx: {int(family)}, len {_length(address)}"