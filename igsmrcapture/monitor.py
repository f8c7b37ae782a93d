"""Capture of one mobile terminal: its DTE and DCE serial ports."""

from __future__ import annotations

import logging
import select

from .config import get_instance
from .file_writer import IgsmrFileWriter
from .serial_port import IgsmrSerialPort, SourceType
from .tty_reader import Poller
from .udp import IgsmrUdpSender

log = logging.getLogger(__name__)


class IgsmrMonitor:
    """Forwards data and modem-line changes of one terminal to UDP and to files."""

    CHECK_STATUS_EVERY = 10

    def __init__(self, mt_index, dte_serial, dce_serial, config=None):
        config = get_instance() if config is None else config
        self.mt_index = mt_index
        self.dte = None
        self.dce = None
        self.udp = None
        self.file_writer = None
        try:
            self.dte = IgsmrSerialPort(dte_serial, mt_index, SourceType.DTE)
            self.dte_status = self.dte.read_status()
            self.dce = IgsmrSerialPort(dce_serial, mt_index, SourceType.DCE)
            self.dce_status = self.dce.read_status()
            self.udp = IgsmrUdpSender(config.ip_address, config.port)
            prefix = f"{config.file_prefix}{int(mt_index)}_"
            self.file_writer = IgsmrFileWriter(prefix, "", config.file_slice_size)
        except Exception:
            self.close()
            raise
        self.poll_timeout = config.poll_timeout

    def _drop(self, poller: Poller, port: IgsmrSerialPort, stop_event) -> None:
        poller.unwatch(port)
        port.close()
        stop_event.set()

    def run(self, stop_event):
        """Capture until stop_event is set; a port error sets it too."""
        poller = Poller()
        poller.watch([self.dte, self.dce])
        count = 0
        while not stop_event.is_set():
            if count % self.CHECK_STATUS_EVERY == 0:
                self.process_signal()

            if poller.poll(self.poll_timeout) == 0:
                count = 0
                continue
            count += 1

            for event, port in zip(poller.events(), poller.readers()):
                if event.fd < 0 or port is None:
                    continue
                if event.revents & select.POLLERR:
                    log.error("event error of '%s'", port.dev_name)
                    self._drop(poller, port, stop_event)
                    continue
                if event.revents & select.POLLIN:
                    try:
                        record = port.read_data()
                    except OSError as exc:
                        log.error("read error of '%s': %s", port.dev_name, exc)
                        self._drop(poller, port, stop_event)
                        continue
                    self.process_data(record)

    def process_data(self, data):
        """Send a record over UDP and append it to the capture file."""
        self.udp.send(data)
        self.file_writer.write(data)

    def process_signal(self):
        self.process_dte_signal()
        self.process_dce_signal()

    def process_dte_signal(self):
        """Record changes of CTS and DSR on the DTE port."""
        new = self.dte.read_status()
        old = self.dte_status
        if old.cts != new.cts:
            self.process_data(self.dte.make_status_cts(new))
        if old.dsr != new.dsr:
            self.process_data(self.dte.make_status_dsr(new))
        self.dte_status = new

    def process_dce_signal(self):
        """Record changes of CTS, DSR, DCD and RI on the DCE port."""
        new = self.dce.read_status()
        old = self.dce_status
        if old.cts != new.cts:
            self.process_data(self.dce.make_status_cts(new))
        if old.dsr != new.dsr:
            self.process_data(self.dce.make_status_dsr(new))
        if old.dcd != new.dcd:
            self.process_data(self.dce.make_status_dcd(new))
        if old.ri != new.ri:
            self.process_data(self.dce.make_status_ri(new))
        self.dce_status = new

    def close(self):
        """Close ports, socket and capture file; safe to call more than once."""
        for resource in (self.dte, self.dce, self.udp, self.file_writer):
            if resource is not None:
                resource.close()