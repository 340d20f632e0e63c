# tubetable/utils/clock.py
from __future__ import annotations

import re
from typing import Any

__all__ = [
    "lenient_int",
    "arrival_time",
]


_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def lenient_int(value: Any) -> int:
    """
    Parse the leading integer of a value ("09" -> 9, "10h" -> 10).
    Anything without a leading integer ("bad", "", None) is 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else 0


def arrival_time(hour: Any, minute: Any, offset_minutes: float) -> str:
    """
    Wall-clock "HH:MM" for a departure at hour:minute plus offset_minutes.
    Fractional offsets are truncated toward zero; the hour wraps at 24.
    """
    total = lenient_int(hour) * 60 + lenient_int(minute) + int(offset_minutes)
    return f"{(total // 60) % 24:02d}:{total % 60:02d}"
