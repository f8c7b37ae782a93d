"""One captured item: serial data or a modem-line signal change."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

MT_BUFFER_LEN = 2048

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CollectionData:
    """A record of data captured from one mobile terminal port."""

    mt: int = 0
    data_source: int = 0
    data_type: int = 0
    data: bytes = b""
    collection_time: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        if len(self.data) > MT_BUFFER_LEN:
            raise ValueError(
                f"data of {len(self.data)} bytes exceeds {MT_BUFFER_LEN} bytes"
            )
        if self.collection_time.tzinfo is None:
            self.collection_time = self.collection_time.replace(tzinfo=timezone.utc)

    @property
    def length(self) -> int:
        """Number of payload bytes."""
        return len(self.data)

    @property
    def utc_time(self) -> int:
        """Collection time in milliseconds since the Unix epoch."""
        return (self.collection_time - _EPOCH) // timedelta(milliseconds=1)