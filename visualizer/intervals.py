"""Supported candle intervals.

The table is hand-maintained and fixed for the lifetime of the process; it is
never read from the store.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IntervalFamily(str, Enum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"


@dataclass(frozen=True)
class Interval:
    value: str
    label: str
    family: IntervalFamily


CANDLE_INTERVAL_1_MIN = "CANDLE_INTERVAL_1_MIN"
CANDLE_INTERVAL_2_MIN = "CANDLE_INTERVAL_2_MIN"
CANDLE_INTERVAL_3_MIN = "CANDLE_INTERVAL_3_MIN"
CANDLE_INTERVAL_5_MIN = "CANDLE_INTERVAL_5_MIN"
CANDLE_INTERVAL_10_MIN = "CANDLE_INTERVAL_10_MIN"
CANDLE_INTERVAL_15_MIN = "CANDLE_INTERVAL_15_MIN"
CANDLE_INTERVAL_30_MIN = "CANDLE_INTERVAL_30_MIN"
CANDLE_INTERVAL_HOUR = "CANDLE_INTERVAL_HOUR"
CANDLE_INTERVAL_2_HOUR = "CANDLE_INTERVAL_2_HOUR"
CANDLE_INTERVAL_4_HOUR = "CANDLE_INTERVAL_4_HOUR"
CANDLE_INTERVAL_DAY = "CANDLE_INTERVAL_DAY"
CANDLE_INTERVAL_WEEK = "CANDLE_INTERVAL_WEEK"
CANDLE_INTERVAL_MONTH = "CANDLE_INTERVAL_MONTH"

INTERVALS: tuple[Interval, ...] = (
    Interval(CANDLE_INTERVAL_1_MIN, "1 minute", IntervalFamily.MINUTE),
    Interval(CANDLE_INTERVAL_2_MIN, "2 minutes", IntervalFamily.MINUTE),
    Interval(CANDLE_INTERVAL_3_MIN, "3 minutes", IntervalFamily.MINUTE),
    Interval(CANDLE_INTERVAL_5_MIN, "5 minutes", IntervalFamily.MINUTE),
    Interval(CANDLE_INTERVAL_10_MIN, "10 minutes", IntervalFamily.MINUTE),
    Interval(CANDLE_INTERVAL_15_MIN, "15 minutes", IntervalFamily.MINUTE),
    Interval(CANDLE_INTERVAL_30_MIN, "30 minutes", IntervalFamily.MINUTE),
    Interval(CANDLE_INTERVAL_HOUR, "1 hour", IntervalFamily.HOUR),
    Interval(CANDLE_INTERVAL_2_HOUR, "2 hours", IntervalFamily.HOUR),
    Interval(CANDLE_INTERVAL_4_HOUR, "4 hours", IntervalFamily.HOUR),
    Interval(CANDLE_INTERVAL_DAY, "1 day", IntervalFamily.DAY),
    Interval(CANDLE_INTERVAL_WEEK, "1 week", IntervalFamily.DAY),
    Interval(CANDLE_INTERVAL_MONTH, "1 month", IntervalFamily.DAY),
)

_INTERVAL_CODES = frozenset(interval.value for interval in INTERVALS)


def list_supported_intervals() -> list[Interval]:
    """Return the supported intervals in declaration order."""
    return list(INTERVALS)


def is_supported_interval(code: str) -> bool:
    return code in _INTERVAL_CODES
