import errno
import os
import select
import termios

import pytest

from igsmrcapture.errors import CaptureError, SysCallError
from igsmrcapture.termios_util import (
    modem_cts,
    modem_dcd,
    modem_dsr,
    modem_ri,
    tty_get_modem_status,
    tty_open,
    tty_open_easy,
    tty_raw,
    tty_set_icanon,
    tty_set_modem_status,
    tty_set_parity,
    tty_set_speed,
    tty_set_timeout,
    with_dsr,
)


@pytest.fixture
def pty_pair():
    master, slave = os.openpty()
    yield master, slave
    for fd in (master, slave):
        try:
            os.close(fd)
        except OSError:
            pass


@pytest.fixture
def plain_fd(tmp_path):
    path = tmp_path / "plain.bin"
    path.write_bytes(b"")
    fd = os.open(path, os.O_RDWR)
    yield fd
    os.close(fd)


def _cc(value):
    return value[0] if isinstance(value, bytes) else value


def test_tty_open_missing_device_raises_syscall_error(tmp_path):
    missing = str(tmp_path / "no-such-tty")
    with pytest.raises(SysCallError) as info:
        tty_open(missing, os.O_RDWR | os.O_NOCTTY | os.O_NONBLOCK)
    assert info.value.code == errno.ENOENT
    assert "Can't open tty" in str(info.value)


def test_tty_open_easy_opens_terminal(pty_pair):
    _, slave = pty_pair
    fd = tty_open_easy(os.ttyname(slave))
    try:
        assert os.isatty(fd)
    finally:
        os.close(fd)


def test_tty_open_returns_terminal_descriptor(pty_pair):
    _, slave = pty_pair
    fd = tty_open(os.ttyname(slave), os.O_RDWR | os.O_NOCTTY | os.O_NONBLOCK)
    try:
        assert fd >= 0 and os.isatty(fd)
    finally:
        os.close(fd)


def test_set_speed_9600(pty_pair):
    _, slave = pty_pair
    tty_set_speed(slave, 9600)
    attrs = termios.tcgetattr(slave)
    assert attrs[4] == termios.B9600
    assert attrs[5] == termios.B9600


def test_set_speed_invalid(pty_pair):
    _, slave = pty_pair
    with pytest.raises(CaptureError, match="invalid speed: 12345"):
        tty_set_speed(slave, 12345)


def test_set_speed_on_non_tty(plain_fd):
    with pytest.raises(SysCallError) as info:
        tty_set_speed(plain_fd, 9600)
    assert info.value.code == errno.ENOTTY


def test_set_parity_8n1(pty_pair):
    _, slave = pty_pair
    tty_set_parity(slave, 8, 1, "N")
    iflag, _, cflag, *_ = termios.tcgetattr(slave)
    assert cflag & termios.CSIZE == termios.CS8
    assert not cflag & termios.PARENB
    assert not cflag & termios.CSTOPB
    # only a lower-case 'n' leaves input parity checking off
    assert iflag & termios.INPCK


def test_set_parity_lowercase_n_disables_checking(pty_pair):
    _, slave = pty_pair
    tty_set_parity(slave, 8, 1, "n")
    iflag = termios.tcgetattr(slave)[0]
    assert iflag & termios.INPCK == 0


@pytest.mark.parametrize(
    "databits, stopbits, parity, fragment",
    [
        (9, 1, "N", "unsupported data size: 9"),
        (8, 1, "X", "unsupported parity"),
        (8, 3, "N", "unsupported stop bits: 3"),
    ],
)
def test_set_parity_rejects_bad_values(pty_pair, databits, stopbits, parity, fragment):
    _, slave = pty_pair
    before = termios.tcgetattr(slave)
    with pytest.raises(CaptureError, match=fragment):
        tty_set_parity(slave, databits, stopbits, parity)
    assert termios.tcgetattr(slave)[:6] == before[:6]


def test_set_icanon(pty_pair):
    _, slave = pty_pair
    both = termios.ECHO | termios.ICANON
    tty_set_icanon(slave, 0, 0)
    lflag = termios.tcgetattr(slave)[3]
    assert lflag & both == 0
    tty_set_icanon(slave, 1, 1)
    lflag = termios.tcgetattr(slave)[3]
    assert lflag & both == both


def test_set_timeout(pty_pair):
    _, slave = pty_pair
    tty_set_icanon(slave, 0, 0)
    tty_set_timeout(slave, 1, 2, 500)
    cc = termios.tcgetattr(slave)[6]
    assert _cc(cc[termios.VMIN]) == 1
    assert _cc(cc[termios.VTIME]) == 25


def test_tty_raw(pty_pair):
    _, slave = pty_pair
    tty_raw(slave)
    iflag, oflag, cflag, lflag, _, _, cc = termios.tcgetattr(slave)
    assert not lflag & (termios.ECHO | termios.ICANON | termios.ISIG)
    assert not iflag & (termios.ICRNL | termios.IXON)
    assert cflag & termios.CSIZE == termios.CS8
    assert not oflag & termios.OPOST
    assert _cc(cc[termios.VMIN]) == 1
    assert _cc(cc[termios.VTIME]) == 0


def test_tty_raw_on_non_tty(plain_fd):
    with pytest.raises(SysCallError) as info:
        tty_raw(plain_fd)
    assert info.value.code == errno.ENOTTY
    assert "tty_raw error" in str(info.value)


def test_raw_write_passes_bytes_unchanged(pty_pair):
    master, slave = pty_pair
    tty_raw(slave)
    tty_set_speed(slave, 9600)
    tty_set_parity(slave, 8, 1, "N")
    os.write(slave, b"hello\n")
    readable, _, _ = select.select([master], [], [], 2.0)
    assert readable == [master]
    assert os.read(master, 100) == b"hello\n"


def test_modem_status_on_non_tty(plain_fd):
    with pytest.raises(SysCallError) as info:
        tty_get_modem_status(plain_fd)
    assert info.value.code == errno.ENOTTY


def test_set_modem_status_on_non_tty(plain_fd):
    with pytest.raises(SysCallError) as info:
        tty_set_modem_status(plain_fd, termios.TIOCM_DSR)
    assert info.value.code == errno.ENOTTY


def test_modem_status_bits():
    assert modem_cts(termios.TIOCM_CTS) is True
    assert modem_cts(0) is False
    assert modem_dsr(termios.TIOCM_DSR) is True
    assert modem_dsr(termios.TIOCM_CTS) is False
    assert modem_dcd(termios.TIOCM_CD) is True
    assert modem_dcd(termios.TIOCM_RI) is False
    assert modem_ri(termios.TIOCM_RI) is True
    assert modem_ri(termios.TIOCM_DSR) is False


def test_with_dsr_on_and_off():
    serial = with_dsr(0, True)
    assert serial == termios.TIOCM_DSR
    assert modem_dsr(serial)
    cleared = with_dsr(termios.TIOCM_DSR | termios.TIOCM_CTS, False)
    assert cleared == termios.TIOCM_CTS
    assert not modem_dsr(cleared)