"""
Interval algebra over "HH:MM" strings.

All ranges are half-open [start, end): back-to-back bookings (one ending
exactly when the next starts) never overlap.
"""

from .models import TimeRange
from .time_utils import parse_time_to_minutes


def to_range(start_time: str, end_time: str) -> TimeRange:
    """Convert a pair of "HH:MM" strings into a minute range."""
    return TimeRange(start=parse_time_to_minutes(start_time), end=parse_time_to_minutes(end_time))


def ranges_overlap(a: TimeRange, b: TimeRange) -> bool:
    """[A, B) and [C, D) overlap iff A < D and C < B."""
    return a.overlaps(b)


def is_range_within(needle: TimeRange, haystack: TimeRange) -> bool:
    return needle.is_within(haystack)


def slot_to_range(slot_start_time: str, duration_minutes: int) -> TimeRange:
    """Range occupied by a slot: [start, start + duration)."""
    start = parse_time_to_minutes(slot_start_time)
    return TimeRange(start=start, end=start + duration_minutes)
