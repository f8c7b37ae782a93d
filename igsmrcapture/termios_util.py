"""Serial terminal setup and modem-line helpers built on termios."""

from __future__ import annotations

import errno
import fcntl
import logging
import os
import struct
import termios
from contextlib import contextmanager

from .errors import SysCallError, err_quit

log = logging.getLogger(__name__)

_IFLAG, _OFLAG, _CFLAG, _LFLAG, _ISPEED, _OSPEED, _CC = range(7)
_MODEM_WORD = struct.Struct("I")

_SPEEDS = {
    38400: termios.B38400,
    19200: termios.B19200,
    9600: termios.B9600,
    4800: termios.B4800,
    2400: termios.B2400,
    1800: termios.B1800,
    1200: termios.B1200,
    600: termios.B600,
    300: termios.B300,
    200: termios.B200,
    150: termios.B150,
    134: termios.B134,
    110: termios.B110,
    75: termios.B75,
    50: termios.B50,
}

_DATA_SIZES = {5: termios.CS5, 6: termios.CS6, 7: termios.CS7, 8: termios.CS8}

_RAW_LFLAG = termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG
_RAW_IFLAG = termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON


def _errno_of(exc: BaseException) -> int:
    if isinstance(exc, ValueError):
        return errno.EBADF
    if isinstance(exc, OSError) and exc.errno is not None:
        return exc.errno
    if exc.args and isinstance(exc.args[0], int):
        return exc.args[0]
    return 0


@contextmanager
def _syscall(fmt: str, *args):
    """Turn a failed terminal call into a logged SysCallError."""
    try:
        yield
    except (OSError, termios.error, ValueError) as exc:
        code = _errno_of(exc)
        message = (fmt % args if args else fmt) + f": {os.strerror(code)}"
        log.error(message)
        raise SysCallError(message, code) from exc


def _tcgetattr(fd: int) -> list:
    with _syscall("tcgetattr error"):
        return termios.tcgetattr(fd)


def _tcsetattr(fd: int, when: int, attrs: list) -> None:
    with _syscall("tcsetattr error"):
        termios.tcsetattr(fd, when, attrs)


def _tcflush(fd: int, queue: int) -> None:
    with _syscall("tcflush error"):
        termios.tcflush(fd, queue)


def _apply(fd: int, attrs: list) -> None:
    _tcsetattr(fd, termios.TCSANOW, attrs)
    _tcflush(fd, termios.TCIOFLUSH)


def _cc_value(value) -> int:
    return value[0] if isinstance(value, bytes) else int(value)


def tty_open(dev, oflag):
    """Open a terminal device and return its descriptor."""
    with _syscall("Can't open tty: %s with flag: %d", dev, oflag):
        return os.open(dev, oflag)


def tty_open_easy(dev):
    """Open a terminal device for reading and writing, not as controlling tty."""
    return tty_open(dev, os.O_RDWR | os.O_NOCTTY)


def tty_set_speed(fd, speed):
    """Set input and output speed in bit/s; only standard rates up to 38400."""
    attrs = _tcgetattr(fd)
    code = _SPEEDS.get(speed)
    if code is None:
        err_quit("Tty_set_speed, invalid speed: %d", speed)
    _tcflush(fd, termios.TCIOFLUSH)
    attrs[_ISPEED] = code
    attrs[_OSPEED] = code
    _apply(fd, attrs)


def _parity_code(parity) -> int:
    if isinstance(parity, str):
        if len(parity) != 1:
            err_quit("Tty_set_parity, unsupported parity: %s", parity)
        return ord(parity)
    return int(parity)


def tty_set_parity(fd, databits, stopbits, parity):
    """Set data bits (5-8), stop bits (1 or 2) and parity (N, O, E or S)."""
    attrs = _tcgetattr(fd)
    iflag, cflag = attrs[_IFLAG], attrs[_CFLAG]

    size = _DATA_SIZES.get(databits)
    if size is None:
        err_quit("Tty_set_parity, unsupported data size: %d", databits)
    cflag = (cflag & ~termios.CSIZE) | size

    code = _parity_code(parity)
    kind = chr(code).upper() if 0 <= code < 0x110000 else ""
    if kind == "N":
        cflag &= ~termios.PARENB
        iflag &= ~termios.INPCK
    elif kind == "O":
        cflag |= termios.PARODD | termios.PARENB
        iflag |= termios.INPCK
    elif kind == "E":
        cflag |= termios.PARENB
        cflag &= ~termios.PARODD
        iflag |= termios.INPCK
    elif kind == "S":
        cflag &= ~termios.PARENB
        cflag &= ~termios.CSTOPB
    else:
        err_quit("Tty_set_parity, unsupported parity: %d", code)

    if stopbits == 1:
        cflag &= ~termios.CSTOPB
    elif stopbits == 2:
        cflag |= termios.CSTOPB
    else:
        err_quit("Tty_set_parity, unsupported stop bits: %d", stopbits)

    if code != ord("n"):
        iflag |= termios.INPCK

    attrs[_IFLAG], attrs[_CFLAG] = iflag, cflag
    _apply(fd, attrs)


def tty_set_icanon(fd, echo, icanon):
    """Switch echo and canonical (line) input on or off."""
    attrs = _tcgetattr(fd)
    lflag = attrs[_LFLAG]
    lflag = lflag | termios.ECHO if echo else lflag & ~termios.ECHO
    lflag = lflag | termios.ICANON if icanon else lflag & ~termios.ICANON
    attrs[_LFLAG] = lflag
    _apply(fd, attrs)


def tty_set_timeout(fd, min_chars, sec, millisec):
    """Set VMIN and VTIME (in tenths of a second) for non-canonical reads."""
    attrs = _tcgetattr(fd)
    cc = list(attrs[_CC])
    cc[termios.VMIN] = min_chars & 0xFF
    cc[termios.VTIME] = (sec * 10 + millisec // 100) & 0xFF
    attrs[_CC] = cc
    _apply(fd, attrs)


def tty_get_modem_status(fd):
    """Return the modem-line bit mask (TIOCM_* bits)."""
    with _syscall("ioctl error"):
        raw = fcntl.ioctl(fd, termios.TIOCMGET, _MODEM_WORD.pack(0))
    return _MODEM_WORD.unpack(raw)[0]


def tty_set_modem_status(fd, serial):
    """Set the modem lines from a TIOCM_* bit mask."""
    with _syscall("ioctl error"):
        fcntl.ioctl(fd, termios.TIOCMSET, _MODEM_WORD.pack(serial & 0xFFFFFFFF))


def modem_cts(serial):
    return bool(serial & termios.TIOCM_CTS)


def modem_dcd(serial):
    return bool(serial & termios.TIOCM_CD)


def modem_ri(serial):
    return bool(serial & termios.TIOCM_RI)


def modem_dsr(serial):
    return bool(serial & termios.TIOCM_DSR)


def with_dsr(serial, on):
    """Return serial with the DSR bit set or cleared."""
    return serial | termios.TIOCM_DSR if on else serial & ~termios.TIOCM_DSR


def _make_raw(fd: int) -> None:
    attrs = termios.tcgetattr(fd)
    saved = attrs[:_CC] + [list(attrs[_CC])]

    attrs[_LFLAG] &= ~_RAW_LFLAG
    attrs[_IFLAG] &= ~_RAW_IFLAG
    attrs[_CFLAG] &= ~(termios.CSIZE | termios.PARENB)
    attrs[_CFLAG] |= termios.CS8
    attrs[_OFLAG] &= ~termios.OPOST
    cc = list(attrs[_CC])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    attrs[_CC] = cc
    termios.tcsetattr(fd, termios.TCSAFLUSH, attrs)

    try:
        check = termios.tcgetattr(fd)
    except termios.error:
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)
        raise
    stuck = not (
        check[_LFLAG] & _RAW_LFLAG
        or check[_IFLAG] & _RAW_IFLAG
        or (check[_CFLAG] & (termios.CSIZE | termios.PARENB | termios.CS8)) != termios.CS8
        or check[_OFLAG] & termios.OPOST
        or _cc_value(check[_CC][termios.VMIN]) != 1
        or _cc_value(check[_CC][termios.VTIME]) != 0
    )
    if not stuck:
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)
        raise OSError(errno.EINVAL, os.strerror(errno.EINVAL))


def tty_raw(fd):
    """Put the terminal into raw mode: 8 bits, no echo, no processing, VMIN=1."""
    with _syscall("tty_raw error: %d", fd):
        _make_raw(fd)