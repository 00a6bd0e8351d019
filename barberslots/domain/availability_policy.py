"""
Pure booking policies.

Each policy answers one question about a proposed slot and returns either
``None`` (allowed) or the ``BlockReason`` explaining the refusal. They never
raise for well-formed input, so the HTTP layer can map reasons to status
codes without exception-driven control flow.
"""

from typing import Optional, Sequence

from .models import BlockedWindow, BlockReason, FullDay, ShopHours, WorkingHoursWindow
from .slot_generator import generate_time_slots
from .time_ranges import is_range_within, ranges_overlap, slot_to_range, to_range


def _has_full_day(windows: Sequence[BlockedWindow]) -> bool:
    return any(isinstance(window, FullDay) for window in windows)


def _overlaps_any_window(slot_start_time: str, duration_minutes: int, windows: Sequence[BlockedWindow]) -> bool:
    slot_range = slot_to_range(slot_start_time, duration_minutes)
    return any(
        ranges_overlap(slot_range, window.to_range())
        for window in windows
        if not isinstance(window, FullDay)
    )


def get_shop_slot_error(
    slot_start_time: str,
    duration_minutes: int,
    shop_hours: Optional[ShopHours],
    closures: Sequence[BlockedWindow],
) -> Optional[BlockReason]:
    """
    Check a slot against shop-wide opening hours and closures.

    Returns SHOP_CLOSED when:
    - there are no shop hours for the day, the shop is closed, or a bound is missing
    - the slot does not fit inside the opening hours
    - the slot overlaps the shop break
    - any closure covers the full day, or the slot overlaps a partial closure
    """
    if (
        shop_hours is None
        or not shop_hours.is_open
        or not shop_hours.start_time
        or not shop_hours.end_time
    ):
        return BlockReason.SHOP_CLOSED

    slot_range = slot_to_range(slot_start_time, duration_minutes)

    if not is_range_within(slot_range, to_range(shop_hours.start_time, shop_hours.end_time)):
        return BlockReason.SHOP_CLOSED

    if shop_hours.break_start and shop_hours.break_end:
        if ranges_overlap(slot_range, to_range(shop_hours.break_start, shop_hours.break_end)):
            return BlockReason.SHOP_CLOSED

    if _has_full_day(closures):
        return BlockReason.SHOP_CLOSED

    if _overlaps_any_window(slot_start_time, duration_minutes, closures):
        return BlockReason.SHOP_CLOSED

    return None


def get_absence_slot_error(
    slot_start_time: str,
    duration_minutes: int,
    absences: Sequence[BlockedWindow],
) -> Optional[BlockReason]:
    """Return BARBER_UNAVAILABLE if any absence of the barber covers the slot."""
    if _has_full_day(absences):
        return BlockReason.BARBER_UNAVAILABLE

    if _overlaps_any_window(slot_start_time, duration_minutes, absences):
        return BlockReason.BARBER_UNAVAILABLE

    return None


def get_working_hours_slot_error(
    working_start_time: str,
    working_end_time: str,
    start_time: str,
    duration_minutes: int,
    break_start: Optional[str] = None,
    break_end: Optional[str] = None,
) -> Optional[BlockReason]:
    """
    Validate a start time against a barber's working window.

    - Outside the working window -> BARBER_UNAVAILABLE (the barber does not
      work then at all)
    - Inside the window but not on the generated slot grid, including slots
      inside or crossing the break -> SLOT_UNAVAILABLE (wrong position)
    """
    slot_range = slot_to_range(start_time, duration_minutes)

    if not is_range_within(slot_range, to_range(working_start_time, working_end_time)):
        return BlockReason.BARBER_UNAVAILABLE

    grid = generate_time_slots(
        start_time=working_start_time,
        end_time=working_end_time,
        duration=duration_minutes,
        break_start=break_start,
        break_end=break_end,
    )

    if not any(slot.time == start_time for slot in grid):
        return BlockReason.SLOT_UNAVAILABLE

    return None


def get_booking_policy_error(
    start_time: str,
    duration_minutes: int,
    working_hours: Optional[WorkingHoursWindow],
    shop_hours: Optional[ShopHours],
    closures: Sequence[BlockedWindow],
    absences: Sequence[BlockedWindow],
) -> Optional[BlockReason]:
    """
    Run every policy for a single booking and return the first refusal.

    Order: barber working hours (and grid), shop hours/closures, absences.
    """
    if working_hours is None:
        return BlockReason.BARBER_UNAVAILABLE

    working_error = get_working_hours_slot_error(
        working_start_time=working_hours.start_time,
        working_end_time=working_hours.end_time,
        start_time=start_time,
        duration_minutes=duration_minutes,
        break_start=working_hours.break_start,
        break_end=working_hours.break_end,
    )
    if working_error:
        return working_error

    shop_error = get_shop_slot_error(
        slot_start_time=start_time,
        duration_minutes=duration_minutes,
        shop_hours=shop_hours,
        closures=closures,
    )
    if shop_error:
        return shop_error

    return get_absence_slot_error(
        slot_start_time=start_time,
        duration_minutes=duration_minutes,
        absences=absences,
    )
