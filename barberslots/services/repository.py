"""
Protocol describing the persistence collaborator needed by the services.

Dates are "YYYY-MM-DD" civil strings and weekdays use 0=Sunday, matching the
persisted rows. Full-day closures and absences come back as ``FullDay``.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..domain.models import (
    AppointmentRecord,
    BlockedWindow,
    ExistingAppointment,
    ShopHours,
    WorkingHoursWindow,
)


class ScheduleRepositoryProtocol(Protocol):
    """Read-only access to shop, barber and appointment records."""

    async def get_service_duration(self, service_id: str) -> Optional[int]:
        """Return the service duration in minutes, or None for unknown/inactive services."""

    async def get_shop_hours(self, day_of_week: int) -> Optional[ShopHours]:
        """Return shop hours for a weekday."""

    async def get_shop_closures(self, date: str) -> List[BlockedWindow]:
        """Return shop closures on a date."""

    async def get_working_hours(self, barber_id: str, day_of_week: int) -> Optional[WorkingHoursWindow]:
        """Return a barber's working window for a weekday, or None if they do not work."""

    async def list_working_hours(self, barber_id: str) -> List[WorkingHoursWindow]:
        """Return a barber's whole weekly template."""

    async def get_barber_absences(self, barber_id: str, date: str) -> List[BlockedWindow]:
        """Return a barber's absences on a date."""

    async def list_barber_absences(self, barber_id: str, start_date: str, end_date: str) -> List[BlockedWindow]:
        """Return a barber's absences in an inclusive date range."""

    async def get_appointments(self, barber_id: str, date: str) -> List[ExistingAppointment]:
        """Return a barber's appointments on a date, any status."""

    async def list_appointments(
        self,
        start_date: str,
        end_date: str,
        barber_id: Optional[str] = None,
    ) -> List[AppointmentRecord]:
        """Return appointments in an inclusive date range, optionally for one barber."""

    async def list_active_barbers(self) -> List[str]:
        """Return the ids of active barbers."""
