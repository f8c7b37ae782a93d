"""A readable terminal device and a poller over several of them."""

from __future__ import annotations

import os
import select
from dataclasses import dataclass

from .errors import CaptureError, err_sys
from .termios_util import (
    tty_get_modem_status,
    tty_open,
    tty_raw,
    tty_set_icanon,
    tty_set_parity,
    tty_set_speed,
    tty_set_timeout,
)


class TtyReader:
    """A terminal device opened for reading."""

    def __init__(self):
        self._fd = -1

    def _check_open(self) -> None:
        if not self.is_open():
            raise CaptureError("tty is not open")

    def open(self, dev, oflag=os.O_RDONLY | os.O_NOCTTY):
        """Open dev; a device already open is closed first."""
        if self.is_open():
            self.close()
        self._fd = tty_open(dev, oflag)

    def close(self):
        """Close the device; a second call does nothing."""
        if not self.is_open():
            return
        fd, self._fd = self._fd, -1
        os.close(fd)

    def set_raw_mode(self):
        self._check_open()
        tty_raw(self._fd)

    def set_speed(self, speed):
        self._check_open()
        tty_set_speed(self._fd, speed)

    def set_parity(self, databits, stopbits, parity):
        self._check_open()
        tty_set_parity(self._fd, databits, stopbits, parity)

    def set_icanon(self, echo, icanon):
        self._check_open()
        tty_set_icanon(self._fd, echo, icanon)

    def set_timeout(self, min_chars, sec, millisec):
        self._check_open()
        tty_set_timeout(self._fd, min_chars, sec, millisec)

    def read(self, size):
        """Read up to size bytes; b'' at end of input.

        A non-blocking device with nothing to read raises BlockingIOError.
        """
        return os.read(self._fd, size)

    def get_modem_status(self):
        return tty_get_modem_status(self._fd)

    def fileno(self):
        return self._fd

    def is_open(self):
        return self._fd >= 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


@dataclass
class PollEvent:
    """One watched descriptor: requested and returned poll events."""

    fd: int
    events: int = select.POLLIN
    revents: int = 0


class Poller:
    """Waits for input on a fixed list of readers."""

    def __init__(self):
        self._events: list[PollEvent] = []
        self._readers: list = []

    def watch(self, readers):
        """Watch these readers for input, replacing any earlier list."""
        self._readers = list(readers)
        self._events = [PollEvent(reader.fileno(), select.POLLIN, 0) for reader in self._readers]

    def unwatch(self, reader):
        """Stop watching reader; its slot keeps fd -1 and reader None."""
        for index, watched in enumerate(self._readers):
            if watched is reader:
                self._events[index] = PollEvent(-1, 0, 0)
                self._readers[index] = None
                return

    def poll(self, timeout):
        """Wait up to timeout milliseconds (negative waits forever); return ready count."""
        poller = select.poll()
        for event in self._events:
            if event.fd >= 0:
                poller.register(event.fd, event.events)
        try:
            ready = poller.poll(timeout)
        except OSError:
            err_sys("poll error")
        returned = dict(ready)
        for event in self._events:
            event.revents = returned.get(event.fd, 0) if event.fd >= 0 else 0
        return len(ready)

    def events(self):
        """Watched slots, in the order given to watch()."""
        return list(self._events)

    def readers(self):
        """Watched readers, None for unwatched slots."""
        return list(self._readers)