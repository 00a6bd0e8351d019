"""
Tests for the AvailabilityService and FinancialService orchestration layer.
"""

import asyncio
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import pendulum
import pytest

from barberslots.domain.exceptions import BarberNotFoundError, ServiceNotFoundError
from barberslots.domain.models import (
    AppointmentRecord,
    BlockedWindow,
    BlockReason,
    ExistingAppointment,
    FullDay,
    PartialDay,
    ShopHours,
    WorkingHoursWindow,
)
from barberslots.services.availability import AvailabilityService
from barberslots.services.financial import FinancialService

MONDAY = "2025-03-10"
# 2025-03-10 10:40 in Sao Paulo
NOW = pendulum.datetime(2025, 3, 10, 13, 40, tz="UTC")
LAST_WEEK = pendulum.datetime(2025, 3, 3, 12, 0, tz="UTC")


class StubScheduleRepository:
    """Minimal in-memory stub matching ScheduleRepositoryProtocol."""

    def __init__(
        self,
        services: Optional[Dict[str, int]] = None,
        shop_hours: Optional[Dict[int, ShopHours]] = None,
        closures: Optional[Dict[str, List[BlockedWindow]]] = None,
        working_hours: Optional[Dict[Tuple[str, int], WorkingHoursWindow]] = None,
        absences: Optional[Dict[Tuple[str, str], List[BlockedWindow]]] = None,
        appointments: Optional[List[AppointmentRecord]] = None,
        barbers: Optional[List[str]] = None,
    ):
        self.services = services or {}
        self.shop_hours = shop_hours or {}
        self.closures = closures or {}
        self.working_hours = working_hours or {}
        self.absences = absences or {}
        self.appointments = appointments or []
        self.barbers = barbers or []
        self.calls: List[str] = []

    async def get_service_duration(self, service_id):
        return self.services.get(service_id)

    async def get_shop_hours(self, day_of_week):
        return self.shop_hours.get(day_of_week)

    async def get_shop_closures(self, date):
        return self.closures.get(date, [])

    async def get_working_hours(self, barber_id, day_of_week):
        return self.working_hours.get((barber_id, day_of_week))

    async def list_working_hours(self, barber_id):
        return [window for (owner, _), window in self.working_hours.items() if owner == barber_id]

    async def get_barber_absences(self, barber_id, date):
        return self.absences.get((barber_id, date), [])

    async def list_barber_absences(self, barber_id, start_date, end_date):
        return [
            window
            for (owner, date), windows in self.absences.items()
            if owner == barber_id and start_date <= date <= end_date
            for window in windows
        ]

    async def get_appointments(self, barber_id, date):
        self.calls.append(f"appointments:{barber_id}:{date}")
        return [
            record.to_existing()
            for record in self.appointments
            if record.barber_id == barber_id and record.date == date
        ]

    async def list_appointments(self, start_date, end_date, barber_id=None):
        self.calls.append(f"list_appointments:{start_date}:{end_date}:{barber_id}")
        return [
            record
            for record in self.appointments
            if start_date <= record.date <= end_date
            and (barber_id is None or record.barber_id == barber_id)
        ]

    async def list_active_barbers(self):
        return list(self.barbers)


def make_record(record_id, date, start_time, end_time, status="CONFIRMED", barber_id="joao", duration=30):
    return AppointmentRecord(
        id=record_id,
        barber_id=barber_id,
        date=date,
        start_time=start_time,
        end_time=end_time,
        status=status,
        service_id="corte",
        service_name="Corte",
        price=Decimal("45.00"),
        duration=duration,
        client_id=f"client-{record_id}",
    )


def _build_repository(**overrides) -> StubScheduleRepository:
    data = dict(
        services={"corte": 30, "corte-barba": 60},
        shop_hours={1: ShopHours(is_open=True, start_time="09:00", end_time="18:00", break_start="12:00", break_end="13:00")},
        working_hours={("joao", 1): WorkingHoursWindow(start_time="09:00", end_time="12:00", day_of_week=1)},
        appointments=[make_record("a1", MONDAY, "10:00", "10:30")],
        barbers=["joao", "pedro"],
    )
    data.update(overrides)
    return StubScheduleRepository(**data)


def _slots(repository, date=MONDAY, barber_id="joao", service_id="corte", now=LAST_WEEK):
    service = AvailabilityService(repository)
    return asyncio.run(service.get_available_slots(date=date, barber_id=barber_id, service_id=service_id, now=now))


class TestGetAvailableSlots:
    """Tests for AvailabilityService.get_available_slots."""

    def test_future_day_marks_booked_slot(self):
        slots = _slots(_build_repository())

        assert [(slot.time, slot.available) for slot in slots] == [
            ("09:00", True),
            ("09:30", True),
            ("10:00", False),
            ("10:30", True),
            ("11:00", True),
            ("11:30", True),
        ]

    def test_longer_service_blocks_the_slot_before_a_booking(self):
        slots = _slots(_build_repository(), service_id="corte-barba")

        assert {slot.time: slot.available for slot in slots} == {
            "09:00": True,
            "10:00": False,
            "11:00": True,
        }

    def test_today_hides_started_slots(self):
        slots = _slots(_build_repository(), now=NOW)

        assert [slot.time for slot in slots if slot.available] == ["11:00", "11:30"]
        assert len(slots) == 6

    def test_partial_absence_removes_slots(self):
        repository = _build_repository(
            absences={("joao", MONDAY): [PartialDay(date=MONDAY, start_time="09:00", end_time="10:00")]}
        )

        slots = _slots(repository)

        assert [slot.time for slot in slots] == ["10:00", "10:30", "11:00", "11:30"]

    def test_partial_closure_removes_slots(self):
        repository = _build_repository(
            closures={MONDAY: [PartialDay(date=MONDAY, start_time="11:00", end_time="12:00")]}
        )

        slots = _slots(repository)

        assert [slot.time for slot in slots] == ["09:00", "09:30", "10:00", "10:30"]

    def test_unknown_service(self):
        assert _slots(_build_repository(), service_id="tattoo") == []

    def test_shop_closed_weekday(self):
        # 2025-03-09 is a Sunday, no shop hours
        assert _slots(_build_repository(), date="2025-03-09") == []

    def test_shop_without_bounds(self):
        repository = _build_repository(shop_hours={1: ShopHours(is_open=True, start_time="09:00")})

        assert _slots(repository) == []

    def test_full_day_closure(self):
        repository = _build_repository(closures={MONDAY: [FullDay(date=MONDAY)]})

        assert _slots(repository) == []

    def test_full_day_absence(self):
        repository = _build_repository(absences={("joao", MONDAY): [FullDay(date=MONDAY)]})

        assert _slots(repository) == []

    def test_barber_not_working(self):
        repository = _build_repository()

        assert _slots(repository, barber_id="pedro") == []
        assert repository.calls == []


class TestCheckBooking:
    """Tests for AvailabilityService.check_booking."""

    def _check(self, start_time, repository=None, date=MONDAY, service_id="corte", now=LAST_WEEK):
        service = AvailabilityService(repository or _build_repository())
        return asyncio.run(
            service.check_booking(
                date=date,
                barber_id="joao",
                service_id=service_id,
                start_time=start_time,
                now=now,
            )
        )

    def test_valid_booking(self):
        assert self._check("10:30") is None

    def test_past_booking(self):
        assert self._check("10:30", now=NOW) == BlockReason.SLOT_IN_PAST
        assert self._check("11:00", now=NOW) is None

    def test_off_grid(self):
        assert self._check("10:15") == BlockReason.SLOT_UNAVAILABLE

    def test_outside_working_hours(self):
        assert self._check("14:00") == BlockReason.BARBER_UNAVAILABLE

    def test_not_working_that_day(self):
        assert self._check("10:00", date="2025-03-11") == BlockReason.BARBER_UNAVAILABLE

    def test_shop_closure(self):
        repository = _build_repository(closures={MONDAY: [FullDay(date=MONDAY)]})

        assert self._check("10:30", repository=repository) == BlockReason.SHOP_CLOSED

    def test_absence(self):
        repository = _build_repository(
            absences={("joao", MONDAY): [PartialDay(date=MONDAY, start_time="10:00", end_time="11:00")]}
        )

        assert self._check("10:30", repository=repository) == BlockReason.BARBER_UNAVAILABLE

    def test_confirmed_appointment_occupies_slot(self):
        assert self._check("10:00") == BlockReason.SLOT_OCCUPIED

    def test_longer_service_running_into_appointment(self):
        repository = _build_repository(appointments=[make_record("a1", MONDAY, "10:30", "11:00")])

        assert self._check("10:00", repository=repository, service_id="corte-barba") == BlockReason.SLOT_OCCUPIED
        assert self._check("10:00", repository=repository) is None

    def test_cancelled_appointment_frees_slot(self):
        repository = _build_repository(
            appointments=[make_record("a1", MONDAY, "10:00", "10:30", status="CANCELLED_BY_CLIENT")]
        )

        assert self._check("10:00", repository=repository) is None

    def test_policy_reason_wins_over_occupied(self):
        repository = _build_repository(absences={("joao", MONDAY): [FullDay(date=MONDAY)]})

        assert self._check("10:00", repository=repository) == BlockReason.BARBER_UNAVAILABLE

    def test_unknown_service(self):
        with pytest.raises(ServiceNotFoundError):
            self._check("10:30", service_id="tattoo")


# January 2025 has five Wednesdays
WEDNESDAY = WorkingHoursWindow(start_time="09:00", end_time="18:00", break_start="12:00", break_end="13:00", day_of_week=3)
JANUARY_NOW = pendulum.datetime(2025, 2, 1, 12, 0, tz="UTC")


def _financial_repository() -> StubScheduleRepository:
    appointments = [
        make_record(f"j{day}", f"2025-01-{day:02d}", "09:00", "11:00", status="COMPLETED", duration=120)
        for day in (1, 8, 15, 22, 29)
    ]
    appointments.append(make_record("p1", "2025-01-04", "09:00", "09:30", status="CONFIRMED", barber_id="pedro"))
    appointments.append(make_record("x1", "2025-01-05", "09:00", "09:30", status="NO_SHOW"))
    appointments.append(make_record("feb", "2025-02-03", "09:00", "09:30", status="COMPLETED"))

    return StubScheduleRepository(
        working_hours={
            ("joao", 3): WEDNESDAY,
            ("pedro", 6): WorkingHoursWindow(start_time="09:00", end_time="13:00", day_of_week=6),
        },
        absences={("pedro", "2025-01-11"): [FullDay(date="2025-01-11")]},
        appointments=appointments,
        barbers=["joao", "pedro"],
    )


class TestFinancialService:
    """Tests for FinancialService.get_stats."""

    def _stats(self, barber_id=None, repository=None):
        service = FinancialService(repository or _financial_repository())
        return asyncio.run(service.get_stats(month=1, year=2025, barber_id=barber_id, now=JANUARY_NOW))

    def test_single_barber(self):
        stats = self._stats(barber_id="joao")

        assert stats.total_appointments == 5
        assert stats.total_revenue == Decimal("225.00")
        assert stats.occupancy.available_hours == 40
        assert stats.occupancy.worked_hours == 10
        assert stats.occupancy.occupancy_rate == 25

    def test_all_barbers_sums_per_barber_hours(self):
        stats = self._stats()

        # pedro works four Saturdays of 4h, one of them absent
        assert stats.occupancy.available_hours == 40 + 12
        assert stats.occupancy.closed_hours == 4
        assert stats.total_appointments == 6
        assert stats.unique_clients == 6

    def test_queries_the_month_range(self):
        repository = _financial_repository()

        self._stats(barber_id="joao", repository=repository)

        assert repository.calls == ["list_appointments:2025-01-01:2025-01-31:joao"]

    def test_unknown_barber(self):
        with pytest.raises(BarberNotFoundError):
            self._stats(barber_id="ghost")
