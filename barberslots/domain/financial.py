"""
Monthly financial report for one barber or the whole shop.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from .dates import format_date, get_business_today, iter_month_dates, parse_local_date
from .hours import AvailableHours, OccupancyStats, build_occupancy
from .models import AppointmentRecord, AppointmentStatus

CENT = Decimal("0.01")


@dataclass
class DailyRevenueEntry:
    date: str
    revenue: Decimal = Decimal("0")
    count: int = 0


@dataclass
class ServiceBreakdownEntry:
    service_id: str
    name: str
    count: int = 0
    revenue: Decimal = Decimal("0")


@dataclass
class FinancialStats:
    """Revenue and occupancy figures for a calendar month."""
    total_revenue: Decimal
    total_appointments: int
    average_ticket: Decimal
    unique_clients: int
    occupancy: OccupancyStats
    daily_revenue: List[DailyRevenueEntry] = field(default_factory=list)
    service_breakdown: List[ServiceBreakdownEntry] = field(default_factory=list)


def select_completed_appointments(
    appointments: Sequence[AppointmentRecord],
    now: Optional[datetime] = None,
) -> List[AppointmentRecord]:
    """
    Appointments that count as work done.

    COMPLETED always counts; CONFIRMED counts once its day has passed
    (nobody marked it, but the client was served).
    """
    today = get_business_today(now)
    return [
        appointment for appointment in appointments
        if appointment.status == AppointmentStatus.COMPLETED.value
        or (
            appointment.status == AppointmentStatus.CONFIRMED.value
            and parse_local_date(appointment.date) < today
        )
    ]


def _daily_revenue(completed: Sequence[AppointmentRecord], month: int, year: int) -> List[DailyRevenueEntry]:
    entries: Dict[str, DailyRevenueEntry] = {
        format_date(day): DailyRevenueEntry(date=format_date(day))
        for day in iter_month_dates(year, month)
    }
    for appointment in completed:
        entry = entries.setdefault(appointment.date, DailyRevenueEntry(date=appointment.date))
        entry.revenue += appointment.price
        entry.count += 1
    return list(entries.values())


def _service_breakdown(completed: Sequence[AppointmentRecord]) -> List[ServiceBreakdownEntry]:
    services: Dict[str, ServiceBreakdownEntry] = {}
    for appointment in completed:
        entry = services.setdefault(
            appointment.service_id,
            ServiceBreakdownEntry(service_id=appointment.service_id, name=appointment.service_name),
        )
        entry.count += 1
        entry.revenue += appointment.price
    return sorted(services.values(), key=lambda entry: entry.count, reverse=True)


def _unique_clients(completed: Sequence[AppointmentRecord]) -> int:
    # Registered and guest ids live in different tables and may collide.
    keys = set()
    for appointment in completed:
        if appointment.client_id:
            keys.add(f"client_{appointment.client_id}")
        elif appointment.guest_client_id:
            keys.add(f"guest_{appointment.guest_client_id}")
    return len(keys)


def build_financial_stats(
    completed: Sequence[AppointmentRecord],
    hours: AvailableHours,
    month: int,
    year: int,
) -> FinancialStats:
    """
    Build the monthly report from completed appointments and available hours.

    Args:
        completed: Output of ``select_completed_appointments``
        hours: Available/closed minutes for the same barber set
        month: Calendar month (1-12)
        year: Calendar year

    Returns:
        FinancialStats with a daily entry for every day of the month and the
        service breakdown sorted by count, most frequent first
    """
    total_revenue = sum((appointment.price for appointment in completed), Decimal("0"))
    total_appointments = len(completed)
    average_ticket = (
        (total_revenue / total_appointments).quantize(CENT) if total_appointments else Decimal("0")
    )
    worked_minutes = sum(appointment.duration for appointment in completed)

    return FinancialStats(
        total_revenue=total_revenue,
        total_appointments=total_appointments,
        average_ticket=average_ticket,
        unique_clients=_unique_clients(completed),
        occupancy=build_occupancy(
            available_minutes=hours.available_minutes,
            closed_minutes=hours.closed_minutes,
            worked_minutes=worked_minutes,
        ),
        daily_revenue=_daily_revenue(completed, month, year),
        service_breakdown=_service_breakdown(completed),
    )
