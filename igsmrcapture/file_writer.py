"""Writes capture records to time-stamped files split into slices."""

from __future__ import annotations

from .autofile import AutoTimestampOFile
from .serializers import serialize_file_record


class IgsmrFileWriter:
    """Appends records to a file and starts a new one once a slice is full."""

    def __init__(self, prefix, suffix, slice_size):
        self.prefix = prefix
        self.suffix = suffix
        self.slice_size = slice_size
        self.current = AutoTimestampOFile(prefix, suffix)

    def write(self, data):
        """Serialize a record, write and flush it, rotating when the slice is full."""
        self.current.write(serialize_file_record(data))
        self.current.flush()
        if self.current.size() >= self.slice_size:
            self.current.close()
            self.current = AutoTimestampOFile(self.prefix, self.suffix)

    def close(self):
        self.current.close()