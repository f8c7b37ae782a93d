"""Compact UTC timestamps used in capture file names."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_to_string(tp):
    """Format a datetime as YYYYmmddHHMMSS in UTC; naive values are taken as UTC."""
    if tp.tzinfo is None:
        moment = tp.replace(tzinfo=timezone.utc)
    else:
        moment = tp.astimezone(timezone.utc)
    return moment.strftime("%Y%m%d%H%M%S")