"""
Tests for loading and querying the YAML schedule repository.
"""

import asyncio
from decimal import Decimal
from pathlib import Path

import pendulum
import pytest

from barberslots.adapters.yaml_repository import YamlScheduleRepository
from barberslots.domain.exceptions import ScheduleDataError
from barberslots.domain.models import ExistingAppointment, FullDay, PartialDay
from barberslots.services.availability import AvailabilityService

EXAMPLE_DATA = Path(__file__).parent.parent / "schedule.example.yaml"

MINIMAL = """
services:
  - {id: corte, name: Corte, duration: 30, price: "45.00"}
barbers:
  - {id: joao, name: Joao}
"""


@pytest.fixture
def repository():
    return YamlScheduleRepository.from_file(EXAMPLE_DATA)


def run(coro):
    return asyncio.run(coro)


def write_data(tmp_path, text):
    path = tmp_path / "schedule.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestQueries:
    """Queries against schedule.example.yaml."""

    def test_service_duration(self, repository):
        assert run(repository.get_service_duration("corte")) == 30
        assert run(repository.get_service_duration("corte-barba")) == 60
        assert run(repository.get_service_duration("tattoo")) is None

    def test_shop_hours(self, repository):
        sunday = run(repository.get_shop_hours(0))
        monday = run(repository.get_shop_hours(1))

        assert sunday.is_open is False
        assert (monday.start_time, monday.end_time, monday.break_start) == ("09:00", "18:00", "12:00")

    def test_closures_become_tagged_windows(self, repository):
        assert run(repository.get_shop_closures("2025-12-25")) == [FullDay(date="2025-12-25")]
        assert run(repository.get_shop_closures("2025-12-24")) == [
            PartialDay(date="2025-12-24", start_time="15:00", end_time="18:00")
        ]
        assert run(repository.get_shop_closures("2025-12-26")) == []

    def test_working_hours(self, repository):
        window = run(repository.get_working_hours("pedro", 2))

        assert (window.start_time, window.end_time, window.has_break) == ("11:00", "18:00", False)
        assert run(repository.get_working_hours("pedro", 1)) is None
        assert [w.day_of_week for w in run(repository.list_working_hours("joao"))] == [1, 2, 3, 4, 5]

    def test_absences(self, repository):
        assert run(repository.get_barber_absences("pedro", "2025-12-23")) == [FullDay(date="2025-12-23")]
        assert run(repository.get_barber_absences("joao", "2025-12-23")) == []

        december = run(repository.list_barber_absences("joao", "2025-12-01", "2025-12-31"))
        assert december == [PartialDay(date="2025-12-22", start_time="14:00", end_time="16:00")]
        assert run(repository.list_barber_absences("joao", "2025-11-01", "2025-11-30")) == []

    def test_appointments_fill_missing_end_time(self, repository):
        appointments = run(repository.get_appointments("joao", "2025-12-22"))

        assert appointments == [
            ExistingAppointment(start_time="09:30", end_time="10:00", status="CONFIRMED"),
            ExistingAppointment(start_time="10:00", end_time="11:00", status="COMPLETED"),
            ExistingAppointment(start_time="11:00", end_time="11:30", status="CANCELLED_BY_CLIENT"),
        ]
        assert run(repository.get_appointments("pedro", "2025-12-22")) == []

    def test_list_appointments_carries_service_details(self, repository):
        records = run(repository.list_appointments("2025-12-01", "2025-12-31", barber_id="joao"))

        second = records[1]
        assert (second.service_name, second.price, second.duration) == ("Corte + Barba", Decimal("80.00"), 60)
        assert second.guest_client_id == "g1"
        assert run(repository.list_appointments("2025-12-01", "2025-12-31", barber_id="pedro")) == []

    def test_active_barbers(self, repository):
        assert run(repository.list_active_barbers()) == ["joao", "pedro"]

    def test_slots_end_to_end(self, repository):
        service = AvailabilityService(repository)
        now = pendulum.datetime(2025, 12, 1, 12, tz="UTC")

        slots = run(service.get_available_slots(date="2025-12-22", barber_id="joao", service_id="corte", now=now))

        assert [slot.time for slot in slots] == [
            "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
            "13:00", "13:30", "16:00", "16:30", "17:00", "17:30",
        ]
        # only the CONFIRMED appointment blocks
        assert [slot.time for slot in slots if not slot.available] == ["09:30"]


class TestLoading:
    """Validation failures surface as ScheduleDataError."""

    def test_minimal_file(self, tmp_path):
        repository = YamlScheduleRepository.from_file(write_data(tmp_path, MINIMAL))

        assert run(repository.get_shop_hours(1)) is None

    def test_inactive_service_has_no_duration(self, tmp_path):
        path = write_data(tmp_path, "services:\n  - {id: old, name: Old, duration: 30, active: false}\n")

        repository = YamlScheduleRepository.from_file(path)

        assert run(repository.get_service_duration("old")) is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ScheduleDataError, match="not found"):
            YamlScheduleRepository.from_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ScheduleDataError, match="Invalid YAML"):
            YamlScheduleRepository.from_file(write_data(tmp_path, "services: [unclosed"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ScheduleDataError, match="mapping"):
            YamlScheduleRepository.from_file(write_data(tmp_path, "- just\n- a list\n"))

    @pytest.mark.parametrize(
        "extra",
        [
            # not zero-padded
            'working_hours:\n  - {barber_id: joao, day_of_week: 1, start_time: "9:00", end_time: "18:00"}\n',
            # end before start
            'working_hours:\n  - {barber_id: joao, day_of_week: 1, start_time: "18:00", end_time: "09:00"}\n',
            # break outside the window
            'working_hours:\n  - {barber_id: joao, day_of_week: 1, start_time: "09:00", end_time: "12:00",'
            ' break_start: "12:00", break_end: "13:00"}\n',
            # unknown barber
            'working_hours:\n  - {barber_id: ana, day_of_week: 1, start_time: "09:00", end_time: "18:00"}\n',
            # duplicate weekday row
            'shop_hours:\n  - {day_of_week: 1, is_open: false}\n  - {day_of_week: 1, is_open: false}\n',
            # open day without bounds
            'shop_hours:\n  - {day_of_week: 1, is_open: true}\n',
            # half-specified window
            'shop_closures:\n  - {date: "2025-12-24", start_time: "15:00"}\n',
            # not a calendar day
            'absences:\n  - {barber_id: joao, date: "2025-02-30"}\n',
            # unknown status
            'appointments:\n  - {id: a1, barber_id: joao, service_id: corte, date: "2025-12-22",'
            ' start_time: "09:00", status: PENDING}\n',
            # unknown service
            'appointments:\n  - {id: a1, barber_id: joao, service_id: tattoo, date: "2025-12-22",'
            ' start_time: "09:00"}\n',
        ],
    )
    def test_invalid_records(self, tmp_path, extra):
        with pytest.raises(ScheduleDataError, match="Invalid schedule data"):
            YamlScheduleRepository.from_file(write_data(tmp_path, MINIMAL + extra))
