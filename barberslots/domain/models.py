"""
Domain models for time ranges, slots and schedule records.

Times are civil wall-clock strings ("HH:MM") at the boundaries and integer
minutes since midnight internally. None of these objects own persistent
state; they are built fresh from repository records for every request.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from .time_utils import parse_time_to_minutes


class BlockReason(str, Enum):
    """Reason a proposed slot cannot be booked."""
    SHOP_CLOSED = "SHOP_CLOSED"
    BARBER_UNAVAILABLE = "BARBER_UNAVAILABLE"
    SLOT_UNAVAILABLE = "SLOT_UNAVAILABLE"
    SLOT_IN_PAST = "SLOT_IN_PAST"
    SLOT_OCCUPIED = "SLOT_OCCUPIED"


class AppointmentStatus(str, Enum):
    """Lifecycle states of a persisted appointment."""
    CONFIRMED = "CONFIRMED"
    CANCELLED_BY_CLIENT = "CANCELLED_BY_CLIENT"
    CANCELLED_BY_BARBER = "CANCELLED_BY_BARBER"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


@dataclass(frozen=True)
class TimeRange:
    """
    Half-open range of minutes since midnight: [start, end).

    Invariant (owned by callers): 0 <= start < end <= 1440.
    """
    start: int
    end: int

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def overlaps(self, other: "TimeRange") -> bool:
        """Check overlap; ranges that only touch at a boundary do not overlap."""
        return self.start < other.end and other.start < self.end

    def is_within(self, other: "TimeRange") -> bool:
        """Check whether this range lies completely inside ``other``."""
        return self.start >= other.start and self.end <= other.end

    def intersect(self, other: "TimeRange") -> Optional["TimeRange"]:
        """
        Calculate the intersection of two ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        return TimeRange(start=max(self.start, other.start), end=min(self.end, other.end))


@dataclass
class TimeSlot:
    """
    One candidate booking start time.

    ``available`` only ever goes from True to False as filters are applied.
    """
    time: str
    available: bool = True


@dataclass(frozen=True)
class WorkingHoursWindow:
    """Working window of a barber for one weekday (0=Sunday, 6=Saturday)."""
    start_time: str
    end_time: str
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    day_of_week: Optional[int] = None

    @property
    def has_break(self) -> bool:
        return bool(self.break_start and self.break_end)

    def working_minutes(self) -> int:
        """Minutes of the window, excluding the break."""
        minutes = parse_time_to_minutes(self.end_time) - parse_time_to_minutes(self.start_time)
        if self.has_break:
            minutes -= parse_time_to_minutes(self.break_end) - parse_time_to_minutes(self.break_start)
        return minutes


@dataclass(frozen=True)
class ShopHours:
    """Shop-wide opening hours for one weekday. Every bound may be missing."""
    is_open: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    day_of_week: Optional[int] = None


@dataclass(frozen=True)
class FullDay:
    """The whole calendar day is blocked."""
    date: str


@dataclass(frozen=True)
class PartialDay:
    """Only [start_time, end_time) is blocked on this calendar day."""
    date: str
    start_time: str
    end_time: str

    def to_range(self) -> TimeRange:
        return TimeRange(
            start=parse_time_to_minutes(self.start_time),
            end=parse_time_to_minutes(self.end_time),
        )


# Shop closures and barber absences share this shape.
BlockedWindow = Union[FullDay, PartialDay]


def blocked_window(date: str, start_time: Optional[str], end_time: Optional[str]) -> BlockedWindow:
    """
    Build a blocked window from a persisted (date, start, end) record.

    Records store "all day" as null bounds; a record missing either bound is
    treated as a full-day block.
    """
    if not start_time or not end_time:
        return FullDay(date=date)
    return PartialDay(date=date, start_time=start_time, end_time=end_time)


@dataclass(frozen=True)
class ExistingAppointment:
    """An already-booked appointment as seen by the availability filters."""
    start_time: str
    end_time: str
    status: str = AppointmentStatus.CONFIRMED.value

    @property
    def is_confirmed(self) -> bool:
        return self.status == AppointmentStatus.CONFIRMED.value


@dataclass(frozen=True)
class AppointmentRecord:
    """A persisted appointment with the service details needed for reporting."""
    id: str
    barber_id: str
    date: str
    start_time: str
    end_time: str
    status: str
    service_id: str
    service_name: str
    price: Decimal
    duration: int
    client_id: Optional[str] = None
    guest_client_id: Optional[str] = None

    def to_existing(self) -> ExistingAppointment:
        return ExistingAppointment(start_time=self.start_time, end_time=self.end_time, status=self.status)
