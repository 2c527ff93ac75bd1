"""Timestamp conversion from span log units to trace event units.

Span logs record nanoseconds; Chrome trace events use microseconds. The
conversion truncates (floor for the non-negative inputs we accept), it never
rounds: 1_999 ns becomes 1 us.
"""
from __future__ import annotations

__all__ = ["NS_PER_US", "ns_to_us"]

NS_PER_US = 1000


def ns_to_us(ns: int) -> int:
    """Convert a nanosecond timestamp to whole microseconds, truncating."""
    return ns // NS_PER_US
