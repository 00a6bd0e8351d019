"""
Generation of the bookable start-time grid for a working window.
"""

from typing import List, Optional

from .models import TimeSlot
from .time_utils import is_in_break_period, minutes_to_time, parse_time_to_minutes

DEFAULT_SLOT_DURATION_MINUTES = 30


def generate_time_slots(
    start_time: str,
    end_time: str,
    duration: int = DEFAULT_SLOT_DURATION_MINUTES,
    break_start: Optional[str] = None,
    break_end: Optional[str] = None,
) -> List[TimeSlot]:
    """
    Generate slots of ``duration`` minutes stepping from ``start_time``.

    Algorithm:
    1. Step through the window in ``duration`` increments
    2. Only emit a slot whose whole range ends by ``end_time``
    3. Drop slots that start inside the break
    4. Drop slots that start before the break but run into it

    Every slot is returned as available, in ascending order.

    Example:
    Window: 11:00 - 14:00, break 12:00 - 13:00, duration 60
    Result: [11:00, 13:00]
    """
    if duration <= 0:
        return []

    slots: List[TimeSlot] = []
    start_minutes = parse_time_to_minutes(start_time)
    end_minutes = parse_time_to_minutes(end_time)

    has_break = bool(break_start and break_end)
    break_start_minutes = parse_time_to_minutes(break_start) if has_break else None

    current = start_minutes
    while current + duration <= end_minutes:
        time_str = minutes_to_time(current)

        if is_in_break_period(time_str, break_start, break_end):
            current += duration
            continue

        # Would end inside the break
        if has_break and current < break_start_minutes < current + duration:
            current += duration
            continue

        slots.append(TimeSlot(time=time_str, available=True))
        current += duration

    return slots


def get_available_slots(slots: List[TimeSlot]) -> List[TimeSlot]:
    """Keep only the slots still marked as available."""
    return [slot for slot in slots if slot.available]
