"""Connected UDP senders for raw bytes and for capture records."""

from __future__ import annotations

import logging
import socket

from .errors import err_quit, err_sys
from .netaddr import inet_ntop, inet_pton
from .serializers import serialize_net_frame

log = logging.getLogger(__name__)


class UdpSender:
    """An IPv4 datagram socket connected to one receiver."""

    def __init__(self):
        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError:
            err_sys("socket error")

    @property
    def closed(self) -> bool:
        return self._sock.fileno() < 0

    def connect(self, serv_ip, serv_port):
        """Fix the destination address; raises CaptureError on a bad address."""
        host = inet_ntop(socket.AF_INET, inet_pton(socket.AF_INET, serv_ip))
        if not 0 <= serv_port <= 0xFFFF:
            err_quit("invalid port %d", serv_port)
        try:
            self._sock.connect((host, serv_port))
        except OSError:
            err_sys("connect error")

    def send(self, data):
        """Send one datagram and return the number of bytes sent."""
        return self._sock.send(data)

    def close(self):
        self._sock.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class IgsmrUdpSender:
    """Sends capture records as network frames to the configured receiver."""

    def __init__(self, serv_ip, serv_port):
        self.serv_ip = serv_ip
        self.serv_port = serv_port
        self._udp = UdpSender()
        try:
            self._udp.connect(serv_ip, serv_port)
        except Exception:
            self._udp.close()
            raise

    def send(self, data):
        """Send a record; returns bytes sent, or 0 when the send failed and was logged."""
        frame = serialize_net_frame(data)
        try:
            return self._udp.send(frame)
        except OSError as exc:
            log.warning("udp send to %s:%d failed: %s", self.serv_ip, self.serv_port, exc)
            return 0

    def close(self):
        self._udp.close()