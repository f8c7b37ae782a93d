"""A mobile-terminal serial port that produces capture records."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import IntEnum

from .collection import MT_BUFFER_LEN, CollectionData
from .errors import CaptureError
from .termios_util import modem_cts, modem_dcd, modem_dsr, modem_ri
from .tty_reader import TtyReader

log = logging.getLogger(__name__)


class SourceType(IntEnum):
    """Which side of the terminal link a port listens to."""

    DTE = 0
    DCE = 1


@dataclass(frozen=True)
class ModemStatus:
    """States of the modem input lines."""

    cts: bool = False
    dcd: bool = False
    ri: bool = False
    dsr: bool = False


class IgsmrSerialPort(TtyReader):
    """A non-blocking 9600 8N1 raw serial port tagged with terminal and source."""

    def __init__(self, dev_name, mt_index, data_source):
        super().__init__()
        self.dev_name = dev_name
        self.mt_index = mt_index
        self.data_source = SourceType(data_source)
        self.open(dev_name, os.O_RDONLY | os.O_NOCTTY | os.O_NONBLOCK)
        try:
            self.set_raw_mode()
            self.set_speed(9600)
            self.set_parity(8, 1, "N")
            self.set_icanon(0, 0)
        except Exception:
            self.close()
            raise

    def read_data(self):
        """Read everything waiting (at most MT_BUFFER_LEN bytes) as a data record."""
        chunks = []
        total = 0
        while total < MT_BUFFER_LEN:
            try:
                chunk = self.read(MT_BUFFER_LEN - total)
            except BlockingIOError:
                break
            if not chunk:
                break
            chunks.append(chunk)
            total += len(chunk)
        data = b"".join(chunks)
        if log.isEnabledFor(logging.DEBUG):
            log.debug(
                "read data from '%s' %d bytes: %r hex: %s",
                self.dev_name,
                len(data),
                data,
                data.hex(" "),
            )
        return CollectionData(
            mt=self.mt_index,
            data_source=int(self.data_source),
            data_type=1,
            data=data,
        )

    def read_status(self):
        """Current modem lines; all off when they cannot be read."""
        try:
            serial = self.get_modem_status()
        except CaptureError:
            log.error("getModemStatus fail")
            serial = 0
        return ModemStatus(
            cts=modem_cts(serial),
            dcd=modem_dcd(serial),
            ri=modem_ri(serial),
            dsr=modem_dsr(serial),
        )

    def make_status_common(self, signal_type):
        """A signal record holding the one-byte signal code."""
        return CollectionData(
            mt=self.mt_index,
            data_source=int(self.data_source),
            data_type=0,
            data=bytes([signal_type & 0xFF]),
        )

    def make_status_cts(self, status):
        return self.make_status_common(0x0 if status.cts else 0x1)

    def make_status_dcd(self, status):
        return self.make_status_common(0x8 if status.dcd else 0x9)

    def make_status_ri(self, status):
        return self.make_status_common(0x10 if status.ri else 0x11)

    def make_status_dsr(self, status):
        return self.make_status_common(0x18 if status.dsr else 0x19)