"""Settings of the capture program, from the command line and a config file."""

from __future__ import annotations

import functools
import sys

from .config_parser import ConfigParser


class IgsmrConfig:
    """Capture settings with their defaults."""

    def __init__(self):
        self.parser = ConfigParser("igsmr")
        (
            self.parser.add_option("help,h")
            .add_string_option("ConfigFile,F", "config file")
            .add_string_option("LogDir", "logging file directory")
            .add_string_option("MT1DTESerial")
            .add_string_option("MT1DCESerial")
            .add_string_option("MT2DTESerial")
            .add_string_option("MT2DCESerial")
            .add_string_option("FilePrefix", "file name prefix")
            .add_int_option("FileSliceSize", "file size per slice, by bytes")
            .add_string_option("IPAddress", "udp receiver ip")
            .add_int_option("Port", "udp receiver port")
            .add_int_option("PollTimeout", "poll timeout(milliseconds)")
            .add_int_option("DaemonMode", "1 for daemon mode, 0 for front end mode")
        )

    @property
    def log_dir(self) -> str:
        return self.parser.get_string("LogDir", ".")

    @property
    def config_file(self) -> str:
        return self.parser.get_string("ConfigFile", "IgsmrCaptureSet.ini")

    @property
    def mt1_dte_serial(self) -> str:
        return self.parser.get_string("MT1DTESerial", "/dev/null")

    @property
    def mt1_dce_serial(self) -> str:
        return self.parser.get_string("MT1DCESerial", "/dev/null")

    @property
    def mt2_dte_serial(self) -> str:
        return self.parser.get_string("MT2DTESerial", "/dev/null")

    @property
    def mt2_dce_serial(self) -> str:
        return self.parser.get_string("MT2DCESerial", "/dev/null")

    @property
    def file_slice_size(self) -> int:
        return self.parser.get_int("FileSliceSize", 10_000_000)

    @property
    def file_prefix(self) -> str:
        return self.parser.get_string("FilePrefix", "/IgsmrRecord/ATP_Igsmr_MT")

    @property
    def ip_address(self) -> str:
        return self.parser.get_string("IPAddress", "0.0.0.0")

    @property
    def port(self) -> int:
        return self.parser.get_int("Port", 0)

    @property
    def poll_timeout(self) -> int:
        return self.parser.get_int("PollTimeout", 300)

    @property
    def daemon_mode(self) -> int:
        return self.parser.get_int("DaemonMode", 0)

    def init(self, argv):
        """Parse arguments, print help and exit if asked, then read the config file."""
        self.parser.parse_command_line(argv)
        if self.parser.has_parsed_option("help"):
            self.parser.print_options_description(sys.stdout)
            raise SystemExit(1)
        self.parser.parse_config_file(self.config_file)

    def print(self, out):
        """Write every setting as 'Name: value' lines."""
        rows = [
            ("ConfigFile", self.config_file),
            ("LogDir", self.log_dir),
            ("MT1DTESerial", self.mt1_dte_serial),
            ("MT1DCESerial", self.mt1_dce_serial),
            ("MT2DTESerial", self.mt2_dte_serial),
            ("MT2DCESerial", self.mt2_dce_serial),
            ("IPAddress", self.ip_address),
            ("Port", self.port),
            ("FilePrefix", self.file_prefix),
            ("FileSliceSize", self.file_slice_size),
            ("PollTimeout", self.poll_timeout),
            ("DaemonMode", self.daemon_mode),
        ]
        for name, value in rows:
            out.write(f"{name}: {value}\n")


@functools.lru_cache(maxsize=None)
def get_instance():
    """The process-wide configuration."""
    return IgsmrConfig()


def initialize(argv):
    """Initialise the process-wide configuration from arguments."""
    config = get_instance()
    config.init(argv)
    return config