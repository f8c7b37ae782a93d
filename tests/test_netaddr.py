import socket

import pytest

from igsmrcapture.errors import CaptureError, SysCallError
from igsmrcapture.netaddr import inet_ntop, inet_pton, sock_ntop


def test_sock_ntop_ipv4_with_port():
    assert sock_ntop(socket.AF_INET, ("127.0.0.1", 8080)) == "127.0.0.1:8080"


def test_sock_ntop_ipv4_without_port_gives_host_only():
    assert sock_ntop(socket.AF_INET, ("10.1.2.3", 0)) == "10.1.2.3"


def test_sock_ntop_ipv6_with_port_uses_brackets():
    assert sock_ntop(socket.AF_INET6, ("::1", 53, 0, 0)) == "[::1]:53"


def test_sock_ntop_ipv6_without_port_gives_host_only():
    assert sock_ntop(socket.AF_INET6, ("::1", 0)) == "::1"


def test_sock_ntop_ipv6_is_canonicalised():
    assert sock_ntop(socket.AF_INET6, ("0:0:0:0:0:0:0:1", 0)) == sock_ntop(
        socket.AF_INET6, ("::1", 0)
    )


def test_sock_ntop_unix_paths():
    assert sock_ntop(socket.AF_UNIX, "") == "(no pathname bound)"
    assert sock_ntop(socket.AF_UNIX, "/tmp/sock") == "/tmp/sock"


def test_sock_ntop_unknown_family():
    text = sock_ntop(12345, b"abcd")
    assert text.startswith("sock_ntop: unknown AF_xxx: 12345")
    assert text.endswith("len 4")


def test_sock_ntop_bad_host_raises():
    with pytest.raises(CaptureError):
        sock_ntop(socket.AF_INET, ("not-an-ip", 80))


def test_inet_pton_loopback_bytes():
    assert inet_pton(socket.AF_INET, "127.0.0.1") == b"\x7f\x00\x00\x01"


@pytest.mark.parametrize(
    "family,text",
    [
        (socket.AF_INET, "192.168.1.20"),
        (socket.AF_INET, "0.0.0.0"),
        (socket.AF_INET6, "fe80::1"),
        (socket.AF_INET6, "2001:db8::42"),
    ],
)
def test_pton_ntop_round_trip(family, text):
    packed = inet_pton(family, text)
    assert len(packed) == (4 if family == socket.AF_INET else 16)
    assert inet_ntop(family, packed) == text


def test_inet_pton_malformed_address_raises_capture_error():
    with pytest.raises(CaptureError, match="inet_pton error for bogus") as info:
        inet_pton(socket.AF_INET, "bogus")
    assert not isinstance(info.value, SysCallError)


def test_inet_ntop_wrong_length_raises_syscall_error():
    with pytest.raises(SysCallError, match="inet_ntop error"):
        inet_ntop(socket.AF_INET, b"\x01\x02")