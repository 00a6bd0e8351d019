"""
Monthly hours aggregation used for occupancy reporting.

Available minutes come from the weekly working-hours template, day by day
over a calendar month, minus the minutes lost to barber absences. Worked
minutes come from completed appointments. Barbers are computed one by one
and summed; there is no interaction between them.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from .dates import format_date, iter_month_dates
from .models import BlockedWindow, FullDay, PartialDay, TimeRange, WorkingHoursWindow
from .time_ranges import to_range


@dataclass(frozen=True)
class AvailableHours:
    """Minutes a barber was scheduled to work vs. minutes lost to absences."""
    available_minutes: int = 0
    closed_minutes: int = 0

    def __add__(self, other: "AvailableHours") -> "AvailableHours":
        return AvailableHours(
            available_minutes=self.available_minutes + other.available_minutes,
            closed_minutes=self.closed_minutes + other.closed_minutes,
        )


@dataclass(frozen=True)
class OccupancyStats:
    """Hour figures are rounded to whole hours, the rate to a whole percent."""
    available_hours: int
    worked_hours: int
    idle_hours: int
    closed_hours: int
    occupancy_rate: int


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (reports expect 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _absences_by_date(absences: Iterable[BlockedWindow]) -> Dict[str, List[BlockedWindow]]:
    grouped: Dict[str, List[BlockedWindow]] = {}
    for absence in absences:
        grouped.setdefault(absence.date, []).append(absence)
    return grouped


def _working_ranges(template: WorkingHoursWindow) -> List[TimeRange]:
    """The working window split around its break."""
    window = to_range(template.start_time, template.end_time)
    if not template.has_break:
        return [window]

    pause = to_range(template.break_start, template.break_end)
    return [
        part for part in (
            TimeRange(start=window.start, end=min(window.end, pause.start)),
            TimeRange(start=max(window.start, pause.end), end=window.end),
        )
        if part.duration_minutes() > 0
    ]


def _merge_ranges(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    merged: List[TimeRange] = []
    for current in sorted(ranges, key=lambda item: item.start):
        if merged and current.start <= merged[-1].end:
            last = merged.pop()
            current = TimeRange(start=last.start, end=max(last.end, current.end))
        merged.append(current)
    return merged


def absent_working_minutes(template: WorkingHoursWindow, absences: Sequence[PartialDay]) -> int:
    """
    Working minutes covered by partial absences on one day.

    Overlapping absences count once; time in the break or outside the
    working window does not count.
    """
    working = _working_ranges(template)
    total = 0
    for absence in _merge_ranges(absence.to_range() for absence in absences):
        for part in working:
            covered = absence.intersect(part)
            if covered is not None:
                total += covered.duration_minutes()
    return total


def calculate_available_hours(
    working_hours: Sequence[WorkingHoursWindow],
    absences: Sequence[BlockedWindow],
    month: int,
    year: int,
) -> AvailableHours:
    """
    Sum available and closed minutes for one barber over a month.

    For each day with a working-hours template:
    - day minutes = working window minus break
    - full-day absence: every day minute is closed
    - partial absences: the working minutes they cover are closed, the rest
      stays available
    - no absence: every day minute is available
    """
    templates = {
        window.day_of_week: window
        for window in working_hours
        if window.day_of_week is not None
    }
    day_absences = _absences_by_date(absences)

    available_minutes = 0
    closed_minutes = 0

    for current in iter_month_dates(year, month):
        template = templates.get(current.isoweekday() % 7)
        if template is None:
            continue

        day_minutes = template.working_minutes()
        absences_today = day_absences.get(format_date(current), [])

        if not absences_today:
            available_minutes += day_minutes
        elif any(isinstance(absence, FullDay) for absence in absences_today):
            closed_minutes += day_minutes
        else:
            absent = absent_working_minutes(template, absences_today)
            closed_minutes += absent
            available_minutes += day_minutes - absent

    return AvailableHours(available_minutes=available_minutes, closed_minutes=closed_minutes)


def aggregate_available_hours(per_barber: Iterable[AvailableHours]) -> AvailableHours:
    """Sum the per-barber results for an "all barbers" report."""
    total = AvailableHours()
    for hours in per_barber:
        total = total + hours
    return total


def build_occupancy(available_minutes: int, closed_minutes: int, worked_minutes: int) -> OccupancyStats:
    """Derive idle hours and the occupancy rate (0 when nothing was available)."""
    available_hours = available_minutes / 60
    worked_hours = worked_minutes / 60
    closed_hours = closed_minutes / 60

    idle_hours = max(0.0, available_hours - worked_hours)
    occupancy_rate = (worked_hours / available_hours) * 100 if available_hours > 0 else 0.0

    return OccupancyStats(
        available_hours=round_half_up(available_hours),
        worked_hours=round_half_up(worked_hours),
        idle_hours=round_half_up(idle_hours),
        closed_hours=round_half_up(closed_hours),
        occupancy_rate=round_half_up(occupancy_rate),
    )
