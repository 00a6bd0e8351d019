"""
Filters that refine generated slots.

The listing pipeline runs in a fixed order:
generate -> shop/absence policy -> existing appointments -> past times.
Filters only ever turn slots unavailable; they never re-enable one.
"""

from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence

from .availability_policy import get_absence_slot_error, get_shop_slot_error
from .dates import DateLike, get_current_time_in_minutes, is_today
from .models import BlockedWindow, ExistingAppointment, ShopHours, TimeRange, TimeSlot
from .time_ranges import to_range
from .time_utils import parse_time_to_minutes


def filter_slots_by_policy(
    slots: List[TimeSlot],
    duration_minutes: int,
    shop_hours: Optional[ShopHours],
    closures: Sequence[BlockedWindow],
    absences: Sequence[BlockedWindow],
) -> List[TimeSlot]:
    """Drop slots rejected by the shop policy or by the barber's absences."""
    return [
        slot for slot in slots
        if get_shop_slot_error(slot.time, duration_minutes, shop_hours, closures) is None
        and get_absence_slot_error(slot.time, duration_minutes, absences) is None
    ]


def filter_available_slots(
    slots: List[TimeSlot],
    existing_appointments: Sequence[ExistingAppointment],
    service_duration: Optional[int] = None,
) -> List[TimeSlot]:
    """
    Mark slots that collide with confirmed appointments as unavailable.

    Args:
        slots: Candidate slots
        existing_appointments: Appointments of the barber on that date;
            only CONFIRMED ones block
        service_duration: Minutes the new service takes. Without it only the
            slot's start minute is probed.

    Returns:
        New list of slots; slots that were already unavailable stay that way
    """
    confirmed_ranges = [
        to_range(appointment.start_time, appointment.end_time)
        for appointment in existing_appointments
        if appointment.is_confirmed
    ]

    filtered: List[TimeSlot] = []
    for slot in slots:
        start = parse_time_to_minutes(slot.time)
        probe = TimeRange(start=start, end=start + (service_duration or 1))

        has_conflict = any(probe.overlaps(booked) for booked in confirmed_ranges)
        filtered.append(replace(slot, available=slot.available and not has_conflict))

    return filtered


def has_overlapping_appointment(
    existing_appointments: Sequence[ExistingAppointment],
    start_time: str,
    end_time: str,
) -> bool:
    """Check whether [start_time, end_time) collides with a confirmed appointment."""
    proposed = to_range(start_time, end_time)
    return any(
        proposed.overlaps(to_range(appointment.start_time, appointment.end_time))
        for appointment in existing_appointments
        if appointment.is_confirmed
    )


def filter_past_slots(
    slots: List[TimeSlot],
    date_value: DateLike,
    now: Optional[datetime] = None,
) -> List[TimeSlot]:
    """
    Mark slots that have already started today as unavailable.

    Returns ``slots`` itself, untouched, when ``date_value`` is not today in
    the business timezone. A slot starting at the current minute is past.
    """
    if not is_today(date_value, now=now):
        return slots

    current_minutes = get_current_time_in_minutes(now)

    return [
        replace(slot, available=slot.available and parse_time_to_minutes(slot.time) > current_minutes)
        for slot in slots
    ]
