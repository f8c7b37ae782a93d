import logging

from igsmrcapture.logsetup import (
    get_max_log_size,
    init_logging,
    is_stop_logging_if_full_disk,
    set_max_log_size,
    shutdown_logging,
    stop_logging_if_full_disk,
)


def test_messages_reach_log_file(tmp_path):
    path = init_logging(tmp_path / "log", "/usr/bin/igsmr")
    try:
        logging.getLogger("igsmrcapture.test").info("config info: %s", "ready")
    finally:
        shutdown_logging()
    assert path.parent == tmp_path / "log"
    assert path.name.startswith("igsmr")
    text = path.read_text(encoding="utf-8")
    assert "config info: ready" in text
    assert text.startswith("I")


def test_files_rotate_at_max_size(tmp_path):
    log_dir = tmp_path / "log"
    init_logging(log_dir, "prog")
    set_max_log_size(1)
    data = "a" * 80
    try:
        logger = logging.getLogger("igsmrcapture.test")
        for i in range(1, 15000):
            logger.info("(%d) %s", i, data)
    finally:
        shutdown_logging()
    files = list(log_dir.iterdir())
    assert len(files) >= 2
    assert all(f.stat().st_size <= 1 << 20 for f in files)
    assert get_max_log_size() == 1


def test_shutdown_detaches_file(tmp_path):
    path = init_logging(tmp_path, "prog")
    shutdown_logging()
    logging.getLogger("igsmrcapture.test").warning("after shutdown")
    assert "after shutdown" not in path.read_text(encoding="utf-8")


def test_shutdown_without_init_is_harmless(tmp_path):
    shutdown_logging()
    shutdown_logging()
    path = init_logging(tmp_path, "prog")
    try:
        logging.getLogger("igsmrcapture.test").error("still works")
    finally:
        shutdown_logging()
    assert "still works" in path.read_text(encoding="utf-8")


def test_stop_logging_if_full_disk_flag():
    stop_logging_if_full_disk()
    assert is_stop_logging_if_full_disk() is True


def test_set_and_get_max_log_size():
    set_max_log_size(5)
    try:
        assert get_max_log_size() == 5
    finally:
        set_max_log_size(1)
    assert get_max_log_size() == 1