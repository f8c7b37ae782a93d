# igsmrcapture

Captures the traffic of two GSM-R mobile terminals, MT1 and MT2. Each terminal has a
DTE serial line and a DCE serial line. The program opens all four lines in raw,
non-blocking mode at 9600 baud, 8N1. It reads the bytes that arrive on each line and
checks the modem lines for changes at regular intervals. On the DTE port it checks CTS
and DSR. On the DCE port it checks CTS, DSR, DCD and RI. The program handles every
record in two ways:

- It appends the record to a binary file whose name carries timestamps. When the current
  file reaches the configured slice size, the program starts a new file.
- It sends the record as one UDP datagram to the configured receiver.

## Install

```
pip install .
```

The program needs a POSIX system with `termios`, `fcntl` and `select.poll`. It is
intended for Linux.

## Running

```
igsmrcapture --ConfigFile IgsmrCaptureSet.ini
```

`igsmrcapture --help` (or `-h`) lists the options and then exits with status 1.

You can give each option on the command line as `--Name value` or `--Name=value`. You
can also put it in the config file as a top-level `Name=value` line. Config file rules:

- Text after `#` is a comment.
- Keys inside `[section]` blocks are ignored.
- A missing config file is also ignored.
- When an option appears on the command line and in the file, the command line value
  wins.

| Option             | Default                     | Meaning                                   |
|--------------------|-----------------------------|-------------------------------------------|
| `ConfigFile`, `-F` | `IgsmrCaptureSet.ini`       | config file to read                       |
| `LogDir`           | `.`                         | directory for the log file                |
| `MT1DTESerial`     | `/dev/null`                 | MT1 DTE serial device                     |
| `MT1DCESerial`     | `/dev/null`                 | MT1 DCE serial device                     |
| `MT2DTESerial`     | `/dev/null`                 | MT2 DTE serial device                     |
| `MT2DCESerial`     | `/dev/null`                 | MT2 DCE serial device                     |
| `FilePrefix`       | `/IgsmrRecord/ATP_Igsmr_MT` | record file name prefix                   |
| `FileSliceSize`    | `10000000`                  | bytes after which a new record file opens |
| `IPAddress`        | `0.0.0.0`                   | UDP receiver IPv4 address                 |
| `Port`             | `0`                         | UDP receiver port                         |
| `PollTimeout`      | `300`                       | poll timeout in milliseconds              |
| `DaemonMode`       | `0`                         | `1` to try to detach from the terminal    |

At startup the program prints the settings in effect and writes them to the log.

Logging goes to `<LogDir>/igsmrcapture.log` at level INFO and above. When that file
reaches 1 MB, it rotates.

With `DaemonMode=1`, the program tries to start a new session. If that works, it also
ignores SIGHUP and points stdin, stdout and stderr at `/dev/null`. If the session cannot
be started, the program keeps running as it is. The process does not fork.

Capture stops when one of these happens:

- The process receives SIGINT (Ctrl-C).
- A serial line reports a poll error.
- A serial line fails to read.

## Record files

For terminal `N`, a record file is first created as `<FilePrefix>N_<start>-`. When the
file is closed, it is renamed to `<FilePrefix>N_<start>-<stop>`. Both timestamps are UTC
in the form `YYYYmmddHHMMSS`.

## Record formats

All integers are big-endian.

A file record is a 13-byte header followed by the data:

- UTC milliseconds since the epoch: high 32 bits, then low 32 bits
- MT index (1 byte)
- data source (1 byte): 0 = DTE, 1 = DCE
- data type (1 byte): 0 = signal change, 1 = serial data
- data length (16 bits)

A UDP frame is a 22-byte header followed by the data:

- `ff ff ff ff`
- frame length (16 bits): data length + 16
- UTC milliseconds: high 32 bits, then low 32 bits
- three ID bytes: `01 01 01`
- MT index, data source, data type and data length, as in a file record

A signal change carries one data byte:

| Line | On     | Off    |
|------|--------|--------|
| CTS  | `0x00` | `0x01` |
| DCD  | `0x08` | `0x09` |
| RI   | `0x10` | `0x11` |
| DSR  | `0x18` | `0x19` |

A serial data record holds at most 2048 bytes. That limit is `MT_BUFFER_LEN` in
`igsmrcapture.collection`.

## Library use

```python
from igsmrcapture.collection import CollectionData
from igsmrcapture.serializers import serialize_file_record, serialize_net_frame

record = CollectionData(mt=1, data_source=0, data_type=1, data=b"AT\r")
file_bytes = serialize_file_record(record)   # 13-byte header + data
frame_bytes = serialize_net_frame(record)    # 22-byte header + data
```

Other modules:

- `igsmrcapture.config_parser.ConfigParser`: declares options and reads them from the
  command line, the environment (`parse_environment`) and config files.
- `igsmrcapture.config`: the program's settings, through `IgsmrConfig`, `initialize` and
  `get_instance`.
- `igsmrcapture.termios_util`: terminal setup helpers: `tty_open`, `tty_raw`,
  `tty_set_speed`, `tty_set_parity`, `tty_set_icanon` and `tty_set_timeout`. It also
  reads and sets the modem lines.
- `igsmrcapture.tty_reader`: `TtyReader` reads a terminal device, and `Poller` waits for
  input on several of them.
- `igsmrcapture.serial_port.IgsmrSerialPort`: a terminal port that turns input and
  modem-line changes into `CollectionData` records.
- `igsmrcapture.autofile.AutoTimestampOFile` and
  `igsmrcapture.file_writer.IgsmrFileWriter`: timestamped files, split into slices.
- `igsmrcapture.udp`: `UdpSender` sends raw datagrams, and `IgsmrUdpSender` sends record
  frames.
- `igsmrcapture.netaddr`: address conversions: `inet_pton`, `inet_ntop` and `sock_ntop`.
- `igsmrcapture.monitor.IgsmrMonitor` and `igsmrcapture.app.IgsmrMonitorApp`: the
  capture loop for one terminal and for both terminals.

## What it does not do

The package only produces records. It has no UDP receiver and no tool that reads record
files back or decodes them. Use your own tools to consume the frames and files.