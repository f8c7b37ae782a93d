"""Binary layouts of a capture record on disk and on the network."""

from __future__ import annotations

import struct

from .collection import MT_BUFFER_LEN, CollectionData

FRAME_HEAD = 0xFFFFFFFF
ATP_ID = (0x1, 0x1, 0x1)

# utc_high, utc_low, mt, data_src, data_type, data_len
_FILE_HEADER = struct.Struct(">IIBBBH")
# frame_head, frame_len, utc_high, utc_low, atp id (3), mt, data_src, data_type, data_len
_NET_HEADER = struct.Struct(">IHIIBBBBBBH")


def _payload(data: CollectionData) -> bytes:
    payload = bytes(data.data)
    if len(payload) > MT_BUFFER_LEN:
        raise ValueError(f"data of {len(payload)} bytes exceeds {MT_BUFFER_LEN} bytes")
    return payload


def _utc_words(data: CollectionData) -> tuple[int, int]:
    utc = data.utc_time
    return (utc >> 32) & 0xFFFFFFFF, utc & 0xFFFFFFFF


def serialize_file_record(data):
    """Encode a record as stored in the capture file (13-byte header + data)."""
    payload = _payload(data)
    high, low = _utc_words(data)
    header = _FILE_HEADER.pack(
        high,
        low,
        data.mt & 0xFF,
        data.data_source & 0xFF,
        data.data_type & 0xFF,
        len(payload),
    )
    return header + payload


def serialize_net_frame(data):
    """Encode a record as a network frame (22-byte header + data)."""
    payload = _payload(data)
    high, low = _utc_words(data)
    frame_len = (len(payload) + 16) & 0xFFFF
    header = _NET_HEADER.pack(
        FRAME_HEAD,
        frame_len,
        high,
        low,
        *ATP_ID,
        data.mt & 0xFF,
        data.data_source & 0xFF,
        data.data_type & 0xFF,
        len(payload),
    )
    return header + payload