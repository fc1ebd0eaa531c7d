"""Quarter-hour slot arithmetic shared by the timeline and footprint aggregators.

A day is split into 96 slots of 15 minutes; slot ``i`` starts at
``hour = i // 4`` and ``minute = (i % 4) * 15``.
"""
from __future__ import annotations

import math
import re
from datetime import datetime
from typing import List, Optional

SLOTS_PER_DAY = 96
SLOT_MINUTES = 15

_TIME_RE = re.compile(r"(?:^|[T ])(\d{2}):(\d{2})")
_APPLE_FORMAT = "%Y-%m-%d %H:%M:%S %z"


class TimestampParseError(ValueError):
    """Raised when a record carries no recognisable ``HH:MM`` time."""


def round_half_up(value: float) -> int:
    # Ties go towards +inf, so round_half_up(2.5) == 3 and round_half_up(-2.5) == -2.
    return int(math.floor(value + 0.5))


def extract_time(value: str) -> str:
    """Return ``HH:MM`` from an ISO, Apple-export or bare time string."""
    if not value:
        raise TimestampParseError("empty timestamp")
    match = _TIME_RE.search(value)
    if not match:
        raise TimestampParseError(f"no time component in {value!r}")
    return f"{match.group(1)}:{match.group(2)}"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, _APPLE_FORMAT)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def time_to_slot_index(time: str) -> int:
    try:
        hour_raw, minute_raw = time.split(":")[:2]
        hour = int(hour_raw)
        minute = int(minute_raw)
    except (AttributeError, ValueError) as exc:
        raise TimestampParseError(f"invalid time {time!r}") from exc
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise TimestampParseError(f"time out of range {time!r}")
    quarter = round_half_up(minute / SLOT_MINUTES)
    if quarter == 4:
        return ((hour + 1) % 24) * 4
    return hour * 4 + quarter


def slot_index_to_time(index: int) -> str:
    hour = index // 4
    minute = (index % 4) * SLOT_MINUTES
    return f"{hour:02d}:{minute:02d}"


def slots_in_range(start: str, end: str) -> List[int]:
    """Slot indices covered by ``start..end``, end exclusive.

    A range whose start slot is after its end slot crosses midnight and wraps
    around; equal start and end slots cover nothing.
    """
    start_idx = time_to_slot_index(start)
    end_idx = time_to_slot_index(end)
    if start_idx <= end_idx:
        return list(range(start_idx, end_idx))
    return list(range(start_idx, SLOTS_PER_DAY)) + list(range(0, end_idx))
