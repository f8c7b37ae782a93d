"""An output file whose name records when writing started and stopped."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from .errors import CaptureError
from .timestamps import utc_to_string

log = logging.getLogger(__name__)


def _stamp() -> str:
    return utc_to_string(datetime.now(timezone.utc))


class AutoTimestampOFile:
    """Binary file named prefix+start+'-'+suffix, renamed with the stop time on close."""

    def __init__(self, prefix, suffix=""):
        self.prefix = prefix
        self.suffix = suffix
        self.start_timestamp = _stamp()
        self.path = f"{prefix}{self.start_timestamp}-{suffix}"
        try:
            self._file = open(self.path, "wb")
        except OSError as exc:
            raise CaptureError(f"open file {self.path} fail") from exc

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write(self, data):
        """Append raw bytes."""
        self._file.write(data)

    def flush(self):
        self._file.flush()

    def size(self):
        """Bytes written so far."""
        return self._file.tell()

    def close(self):
        """Close and rename to include the stop time; a second call does nothing."""
        if self._file.closed:
            return
        self._file.close()
        final = f"{self.prefix}{self.start_timestamp}-{_stamp()}{self.suffix}"
        try:
            os.rename(self.path, final)
        except OSError as exc:
            log.warning("cannot rename %s to %s: %s", self.path, final, exc)
        else:
            self.path = final

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False