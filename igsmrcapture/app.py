"""The capture application: two terminals captured until interrupted."""

from __future__ import annotations

import io
import logging
import signal
import sys
import threading

from .config import get_instance, initialize
from .logsetup import init_logging, set_max_log_size
from .monitor import IgsmrMonitor
from .process import daemon_init, install_signal

log = logging.getLogger(__name__)

_PROGRAM = "igsmrcapture"


class IgsmrMonitorApp:
    """Runs the monitors of terminals 1 and 2 until SIGINT or stop()."""

    def __init__(self, config=None):
        config = get_instance() if config is None else config
        self._stop = threading.Event()
        self.mt1 = IgsmrMonitor(1, config.mt1_dte_serial, config.mt1_dce_serial, config)
        try:
            self.mt2 = IgsmrMonitor(2, config.mt2_dte_serial, config.mt2_dce_serial, config)
        except Exception:
            self.mt1.close()
            raise

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self):
        """Ask the application and both monitors to finish."""
        self._stop.set()

    def _on_sigint(self, signo, frame) -> None:
        log.warning("catch SIGINT")
        self.stop()

    def _capture(self, monitor: IgsmrMonitor) -> None:
        try:
            monitor.run(self._stop)
        except Exception:
            log.exception("MT%d capture failed", monitor.mt_index)
            self.stop()

    def run(self):
        """Capture in two threads until stopped, then close everything.

        In the main thread SIGINT stops the application; the previous
        handler is restored afterwards.
        """
        in_main = threading.current_thread() is threading.main_thread()
        previous = install_signal(signal.SIGINT, self._on_sigint) if in_main else None
        monitors = (self.mt1, self.mt2)
        threads = [
            threading.Thread(
                target=self._capture, args=(monitor,), name=f"MT{monitor.mt_index}", daemon=True
            )
            for monitor in monitors
        ]
        try:
            for thread in threads:
                thread.start()
            while not self._stop.is_set():
                self._stop.wait(1)
        finally:
            self.stop()
            for thread in threads:
                if thread.ident is not None:
                    thread.join()
            for monitor in monitors:
                monitor.close()
            if in_main:
                install_signal(signal.SIGINT, signal.SIG_DFL if previous is None else previous)


def main(argv=None):
    """Read the configuration, set up logging and capture until interrupted."""
    argv = sys.argv[1:] if argv is None else list(argv)
    config = initialize(argv)
    config.print(sys.stdout)

    if config.daemon_mode:
        daemon_init()

    init_logging(config.log_dir, _PROGRAM)
    set_max_log_size(1)

    text = io.StringIO()
    config.print(text)
    log.info("config info:\n%s", text.getvalue())

    IgsmrMonitorApp(config).run()
    return 0