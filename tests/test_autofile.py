import re
from pathlib import Path

import pytest

from igsmrcapture.autofile import AutoTimestampOFile
from igsmrcapture.errors import CaptureError


def lines():
    return ["first line", "second", "third one here"]


def test_write_reports_size_and_renames_on_close(tmp_path):
    prefix = str(tmp_path / "FILE")
    ofile = AutoTimestampOFile(prefix, ".txt")
    open_path = ofile.path
    assert re.fullmatch(re.escape(prefix) + r"\d{14}-\.txt", open_path)
    for line in lines():
        ofile.write(line.encode())
    assert ofile.size() == sum(len(line) for line in lines())
    ofile.close()
    assert not Path(open_path).exists()
    assert re.fullmatch(re.escape(prefix) + r"\d{14}-\d{14}\.txt", ofile.path)
    assert Path(ofile.path).read_bytes() == "".join(lines()).encode()


def test_flush_makes_data_visible(tmp_path):
    ofile = AutoTimestampOFile(str(tmp_path / "FILE"), ".txt")
    for line in lines():
        ofile.write(line.encode())
        ofile.flush()
        assert Path(ofile.path).read_bytes().endswith(line.encode())
    assert ofile.size() == len("".join(lines()))
    ofile.close()


def test_context_manager_closes(tmp_path):
    with AutoTimestampOFile(str(tmp_path / "CTX")) as ofile:
        ofile.write(b"abc")
    assert ofile.closed
    assert Path(ofile.path).read_bytes() == b"abc"
    assert ofile.path.startswith(str(tmp_path / "CTX") + ofile.start_timestamp + "-")


def test_close_twice_keeps_path(tmp_path):
    ofile = AutoTimestampOFile(str(tmp_path / "TWICE"))
    ofile.close()
    renamed = ofile.path
    ofile.close()
    assert ofile.path == renamed
    assert Path(renamed).exists()


def test_open_failure_raises(tmp_path):
    with pytest.raises(CaptureError) as info:
        AutoTimestampOFile(str(tmp_path / "missing" / "FILE"))
    assert "open file" in str(info.value)
    assert str(info.value).endswith(" fail")