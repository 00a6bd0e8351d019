"""
Validated record schemas for schedule data files.

This is the input-validation layer the domain relies on: every time is a
zero-padded "HH:MM" string and every date a real "YYYY-MM-DD" day before
anything reaches the slot engine.
"""

import re
from decimal import Decimal
from typing import List, Optional

import pendulum
from pydantic import BaseModel, Field, field_validator, model_validator

from ..domain.models import AppointmentStatus
from ..domain.time_utils import parse_time_to_minutes

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_time(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not TIME_PATTERN.match(value):
        raise ValueError(f"Time must be HH:MM (24h, zero-padded), got {value!r}")
    return value


def validate_date(value: str) -> str:
    if not DATE_PATTERN.match(value):
        raise ValueError(f"Date must be YYYY-MM-DD, got {value!r}")
    year, month, day = (int(part) for part in value.split("-"))
    try:
        pendulum.date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"Invalid calendar date {value!r}: {exc}") from exc
    return value


def _check_window(start: Optional[str], end: Optional[str], label: str) -> None:
    if start and end and parse_time_to_minutes(start) >= parse_time_to_minutes(end):
        raise ValueError(f"{label} start {start} must be before end {end}")


def _check_break(
    start_time: Optional[str],
    end_time: Optional[str],
    break_start: Optional[str],
    break_end: Optional[str],
) -> None:
    if bool(break_start) != bool(break_end):
        raise ValueError("break_start and break_end must be set together")
    if not break_start:
        return
    _check_window(break_start, break_end, "Break")
    if start_time and end_time:
        if parse_time_to_minutes(break_start) < parse_time_to_minutes(start_time) or (
            parse_time_to_minutes(break_end) > parse_time_to_minutes(end_time)
        ):
            raise ValueError(f"Break {break_start}-{break_end} must lie within {start_time}-{end_time}")


class ServiceRecord(BaseModel):
    id: str
    name: str
    duration: int
    price: Decimal = Decimal("0")
    active: bool = True

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure service duration is positive."""
        if value <= 0:
            raise ValueError("duration must be greater than zero")
        return value


class BarberRecord(BaseModel):
    id: str
    name: str = ""
    active: bool = True


class ShopHoursRecord(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    is_open: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    @field_validator("start_time", "end_time", "break_start", "break_end")
    @classmethod
    def check_times(cls, value: Optional[str]) -> Optional[str]:
        return validate_time(value)

    @model_validator(mode="after")
    def validate_hours(self) -> "ShopHoursRecord":
        """An open day needs both bounds; the break must sit inside them."""
        if self.is_open and not (self.start_time and self.end_time):
            raise ValueError(f"Open day {self.day_of_week} needs start_time and end_time")
        _check_window(self.start_time, self.end_time, "Shop hours")
        _check_break(self.start_time, self.end_time, self.break_start, self.break_end)
        return self


class WorkingHoursRecord(BaseModel):
    barber_id: str
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    @field_validator("start_time", "end_time", "break_start", "break_end")
    @classmethod
    def check_times(cls, value: Optional[str]) -> Optional[str]:
        return validate_time(value)

    @model_validator(mode="after")
    def validate_hours(self) -> "WorkingHoursRecord":
        _check_window(self.start_time, self.end_time, "Working hours")
        _check_break(self.start_time, self.end_time, self.break_start, self.break_end)
        return self


class BlockedWindowRecord(BaseModel):
    """A closure or absence; null bounds mean the full day."""
    date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value: str) -> str:
        return validate_date(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value: Optional[str]) -> Optional[str]:
        return validate_time(value)

    @model_validator(mode="after")
    def validate_bounds(self) -> "BlockedWindowRecord":
        """Reject half-specified windows instead of silently blocking the whole day."""
        if bool(self.start_time) != bool(self.end_time):
            raise ValueError(
                f"Window on {self.date} must set both start_time and end_time, or neither for a full day"
            )
        _check_window(self.start_time, self.end_time, "Window")
        return self


class AbsenceRecord(BlockedWindowRecord):
    barber_id: str


class AppointmentRecordModel(BaseModel):
    id: str
    barber_id: str
    service_id: str
    date: str
    start_time: str
    end_time: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    client_id: Optional[str] = None
    guest_client_id: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value: str) -> str:
        return validate_date(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value: Optional[str]) -> Optional[str]:
        return validate_time(value)


class ScheduleData(BaseModel):
    """Root of a schedule data file."""
    services: List[ServiceRecord] = Field(default_factory=list)
    barbers: List[BarberRecord] = Field(default_factory=list)
    shop_hours: List[ShopHoursRecord] = Field(default_factory=list)
    shop_closures: List[BlockedWindowRecord] = Field(default_factory=list)
    working_hours: List[WorkingHoursRecord] = Field(default_factory=list)
    absences: List[AbsenceRecord] = Field(default_factory=list)
    appointments: List[AppointmentRecordModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_references(self) -> "ScheduleData":
        """Ensure weekday rows are unique and references resolve."""
        shop_days = [row.day_of_week for row in self.shop_hours]
        if len(shop_days) != len(set(shop_days)):
            raise ValueError("shop_hours has more than one row for the same day_of_week")

        barber_ids = {barber.id for barber in self.barbers}
        service_ids = {service.id for service in self.services}

        seen: set[tuple[str, int]] = set()
        for row in self.working_hours:
            key = (row.barber_id, row.day_of_week)
            if key in seen:
                raise ValueError(f"Duplicate working hours for barber {row.barber_id} on day {row.day_of_week}")
            seen.add(key)
            if row.barber_id not in barber_ids:
                raise ValueError(f"Working hours reference unknown barber {row.barber_id}")

        for absence in self.absences:
            if absence.barber_id not in barber_ids:
                raise ValueError(f"Absence references unknown barber {absence.barber_id}")

        for appointment in self.appointments:
            if appointment.barber_id not in barber_ids:
                raise ValueError(f"Appointment {appointment.id} references unknown barber {appointment.barber_id}")
            if appointment.service_id not in service_ids:
                raise ValueError(f"Appointment {appointment.id} references unknown service {appointment.service_id}")

        return self
