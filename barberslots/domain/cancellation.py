"""
Client cancellation rules.

Clients cannot cancel inside the block window before the start time; a
barber or admin still can, that check lives in the caller.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .dates import DateLike, get_business_today, get_minutes_until_appointment, to_business_date

CANCELLATION_BLOCK_WINDOW_MINUTES = 2 * 60


@dataclass(frozen=True)
class CancellationStatus:
    can_cancel: bool
    is_blocked: bool


def can_cancel_before_start(minutes_until_appointment: int) -> bool:
    """Allowed as long as the appointment has not started."""
    return minutes_until_appointment > 0


def can_client_cancel_outside_window(
    minutes_until_appointment: int,
    block_window_minutes: int = CANCELLATION_BLOCK_WINDOW_MINUTES,
) -> bool:
    return minutes_until_appointment > block_window_minutes


def is_cancellation_blocked(
    minutes_until_appointment: int,
    block_window_minutes: int = CANCELLATION_BLOCK_WINDOW_MINUTES,
) -> bool:
    """True inside the window: not started yet, but too close to the start."""
    return 0 < minutes_until_appointment <= block_window_minutes


def get_appointment_cancellation_status(
    minutes_until_appointment: int,
    block_window_minutes: int = CANCELLATION_BLOCK_WINDOW_MINUTES,
) -> CancellationStatus:
    return CancellationStatus(
        can_cancel=can_client_cancel_outside_window(minutes_until_appointment, block_window_minutes),
        is_blocked=is_cancellation_blocked(minutes_until_appointment, block_window_minutes),
    )


def can_client_cancel(
    appointment_date: DateLike,
    start_time: str,
    now: Optional[datetime] = None,
) -> bool:
    """Whether an appointment has not started yet, in business time."""
    if to_business_date(appointment_date) < get_business_today(now):
        return False

    return can_cancel_before_start(get_minutes_until_appointment(appointment_date, start_time, now=now))
