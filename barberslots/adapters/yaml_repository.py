"""
Schedule repository backed by a YAML data file.

Stands in for the database: records are validated on load and indexed the
way the real tables are keyed - working hours by (barber, weekday), closures
and absences by (owner, date), appointments by (barber, date). Dates are kept
as UTC-midnight instants, the shape of date-only columns.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pendulum import DateTime
from pydantic import ValidationError

from ..domain.dates import format_db_date, parse_date_to_utc_midnight
from ..domain.exceptions import ScheduleDataError
from ..domain.models import (
    AppointmentRecord,
    BlockedWindow,
    ExistingAppointment,
    ShopHours,
    WorkingHoursWindow,
    blocked_window,
)
from ..domain.time_utils import calculate_end_time
from .records import BlockedWindowRecord, ScheduleData

logger = logging.getLogger(__name__)


def _to_window(record: BlockedWindowRecord) -> BlockedWindow:
    return blocked_window(record.date, record.start_time, record.end_time)


class YamlScheduleRepository:
    """
    Repository that serves schedule records from an in-memory ``ScheduleData``.

    Implements ``ScheduleRepositoryProtocol``.
    """

    def __init__(self, data: ScheduleData):
        self.data = data
        self._services = {service.id: service for service in data.services}
        self._shop_hours = {row.day_of_week: row for row in data.shop_hours}
        self._working_hours = {(row.barber_id, row.day_of_week): row for row in data.working_hours}

        self._closures: Dict[DateTime, List[BlockedWindowRecord]] = {}
        for closure in data.shop_closures:
            self._closures.setdefault(parse_date_to_utc_midnight(closure.date), []).append(closure)

        self._absences: Dict[Tuple[str, DateTime], List[BlockedWindowRecord]] = {}
        for absence in data.absences:
            key = (absence.barber_id, parse_date_to_utc_midnight(absence.date))
            self._absences.setdefault(key, []).append(absence)

    @classmethod
    def from_file(cls, data_path: Path) -> "YamlScheduleRepository":
        """
        Load and validate a schedule data file.

        Raises:
            ScheduleDataError: If the file is missing, is not valid YAML, or
                its records fail validation
        """
        if not data_path.exists():
            raise ScheduleDataError(f"Schedule data file not found: {data_path}")

        try:
            with open(data_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ScheduleDataError(f"Invalid YAML in {data_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ScheduleDataError("Schedule data file must contain a mapping at the root level.")

        try:
            data = ScheduleData(**raw)
        except ValidationError as exc:
            raise ScheduleDataError(f"Invalid schedule data in {data_path}:\n{exc}") from exc

        logger.debug(
            "Loaded %s barbers, %s services, %s appointments from %s",
            len(data.barbers),
            len(data.services),
            len(data.appointments),
            data_path,
        )
        return cls(data)

    async def get_service_duration(self, service_id: str) -> Optional[int]:
        service = self._services.get(service_id)
        if service is None or not service.active:
            return None
        return service.duration

    async def get_shop_hours(self, day_of_week: int) -> Optional[ShopHours]:
        row = self._shop_hours.get(day_of_week)
        if row is None:
            return None
        return ShopHours(
            is_open=row.is_open,
            start_time=row.start_time,
            end_time=row.end_time,
            break_start=row.break_start,
            break_end=row.break_end,
            day_of_week=row.day_of_week,
        )

    async def get_shop_closures(self, date: str) -> List[BlockedWindow]:
        return [_to_window(record) for record in self._closures.get(parse_date_to_utc_midnight(date), [])]

    def _window(self, row) -> WorkingHoursWindow:
        return WorkingHoursWindow(
            start_time=row.start_time,
            end_time=row.end_time,
            break_start=row.break_start,
            break_end=row.break_end,
            day_of_week=row.day_of_week,
        )

    async def get_working_hours(self, barber_id: str, day_of_week: int) -> Optional[WorkingHoursWindow]:
        row = self._working_hours.get((barber_id, day_of_week))
        return self._window(row) if row is not None else None

    async def list_working_hours(self, barber_id: str) -> List[WorkingHoursWindow]:
        return [
            self._window(row)
            for (owner, _), row in sorted(self._working_hours.items())
            if owner == barber_id
        ]

    async def get_barber_absences(self, barber_id: str, date: str) -> List[BlockedWindow]:
        key = (barber_id, parse_date_to_utc_midnight(date))
        return [_to_window(record) for record in self._absences.get(key, [])]

    async def list_barber_absences(self, barber_id: str, start_date: str, end_date: str) -> List[BlockedWindow]:
        start = parse_date_to_utc_midnight(start_date)
        end = parse_date_to_utc_midnight(end_date)
        windows: List[BlockedWindow] = []
        for (owner, day), records in sorted(self._absences.items()):
            if owner == barber_id and start <= day <= end:
                windows.extend(_to_window(record) for record in records)
        return windows

    async def get_appointments(self, barber_id: str, date: str) -> List[ExistingAppointment]:
        day = parse_date_to_utc_midnight(date)
        return [
            record.to_existing()
            for record in self._appointment_records()
            if record.barber_id == barber_id and parse_date_to_utc_midnight(record.date) == day
        ]

    async def list_appointments(
        self,
        start_date: str,
        end_date: str,
        barber_id: Optional[str] = None,
    ) -> List[AppointmentRecord]:
        start = parse_date_to_utc_midnight(start_date)
        end = parse_date_to_utc_midnight(end_date)
        return [
            record
            for record in self._appointment_records()
            if start <= parse_date_to_utc_midnight(record.date) <= end
            and (barber_id is None or record.barber_id == barber_id)
        ]

    async def list_active_barbers(self) -> List[str]:
        return [barber.id for barber in self.data.barbers if barber.active]

    def _appointment_records(self) -> List[AppointmentRecord]:
        records: List[AppointmentRecord] = []
        for row in self.data.appointments:
            service = self._services[row.service_id]
            records.append(
                AppointmentRecord(
                    id=row.id,
                    barber_id=row.barber_id,
                    date=format_db_date(parse_date_to_utc_midnight(row.date)),
                    start_time=row.start_time,
                    end_time=row.end_time or calculate_end_time(row.start_time, service.duration),
                    status=row.status.value,
                    service_id=service.id,
                    service_name=service.name,
                    price=service.price,
                    duration=service.duration,
                    client_id=row.client_id,
                    guest_client_id=row.guest_client_id,
                )
            )
        return records
