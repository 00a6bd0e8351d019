"""
Wall-clock time helpers for "HH:MM" strings.

Inputs are expected to be well-formed, zero-padded 24h strings coming from
validated records. Nothing here range-checks or normalizes values.
"""

from typing import Optional


def parse_time_to_minutes(time_str: str) -> int:
    """Parse "HH:MM" into minutes since midnight."""
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM" (values past 24h are not wrapped)."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def add_minutes_to_time(time_str: str, duration: int) -> str:
    """Add a duration in minutes to a time string."""
    return minutes_to_time(parse_time_to_minutes(time_str) + duration)


def calculate_end_time(start_time: str, duration_minutes: int) -> str:
    """
    End time of an appointment.

    Not clamped to 24h; appointments are already bounded by working hours.
    """
    return add_minutes_to_time(start_time, duration_minutes)


def is_in_break_period(
    time_str: str,
    break_start: Optional[str],
    break_end: Optional[str],
) -> bool:
    """Check whether ``time_str`` falls inside [break_start, break_end)."""
    if not break_start or not break_end:
        return False

    minutes = parse_time_to_minutes(time_str)
    return parse_time_to_minutes(break_start) <= minutes < parse_time_to_minutes(break_end)
