"""
Application service for the monthly financial/occupancy report.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..domain.dates import month_bounds
from ..domain.exceptions import BarberNotFoundError
from ..domain.financial import FinancialStats, build_financial_stats, select_completed_appointments
from ..domain.hours import AvailableHours, aggregate_available_hours, calculate_available_hours
from .repository import ScheduleRepositoryProtocol

logger = logging.getLogger(__name__)


class FinancialService:
    """Builds monthly reports for a single barber or for all active barbers."""

    def __init__(self, repository: ScheduleRepositoryProtocol) -> None:
        self._repository = repository

    async def get_stats(
        self,
        *,
        month: int,
        year: int,
        barber_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FinancialStats:
        """
        Compute the report for ``month``/``year``.

        Args:
            month: Calendar month (1-12)
            year: Calendar year
            barber_id: Restrict to one barber; None aggregates all active barbers
            now: Pin "today" (CONFIRMED appointments before today count as done)

        Raises:
            BarberNotFoundError: If ``barber_id`` is not an active barber
        """
        active_barbers = await self._repository.list_active_barbers()

        if barber_id is not None and barber_id not in active_barbers:
            raise BarberNotFoundError(f"Barber not found: {barber_id}")

        barber_ids: List[str] = [barber_id] if barber_id is not None else active_barbers
        start_date, end_date = month_bounds(year, month)

        appointments = await self._repository.list_appointments(start_date, end_date, barber_id=barber_id)
        completed = select_completed_appointments(appointments, now=now)

        per_barber: List[AvailableHours] = []
        for current_id in barber_ids:
            working_hours = await self._repository.list_working_hours(current_id)
            absences = await self._repository.list_barber_absences(current_id, start_date, end_date)
            per_barber.append(calculate_available_hours(working_hours, absences, month=month, year=year))

        hours = aggregate_available_hours(per_barber)
        logger.debug(
            "Report %s-%02d for %s barber(s): %s completed, %s available minutes",
            year,
            month,
            len(barber_ids),
            len(completed),
            hours.available_minutes,
        )

        return build_financial_stats(completed, hours, month=month, year=year)
