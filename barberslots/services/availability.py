"""
Application service for listing bookable slots and validating bookings.

The service fetches the day's records through a repository protocol and
delegates every decision to the pure domain functions, in a fixed order:
generate -> shop/absence policy -> existing appointments -> past times.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..domain.availability_policy import get_booking_policy_error
from ..domain.dates import (
    day_of_week,
    is_date_time_in_past,
    parse_date_as_business_noon,
    parse_local_date,
)
from ..domain.exceptions import ServiceNotFoundError
from ..domain.models import BlockReason, FullDay, TimeSlot
from ..domain.slot_filters import (
    filter_available_slots,
    filter_past_slots,
    filter_slots_by_policy,
    has_overlapping_appointment,
)
from ..domain.slot_generator import generate_time_slots
from ..domain.time_utils import calculate_end_time
from .repository import ScheduleRepositoryProtocol

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Orchestrates record retrieval and slot computation for one barber/date.

    Dependency inversion toward a protocol makes it easy to plug in the YAML
    repository or a stub in tests.
    """

    def __init__(self, repository: ScheduleRepositoryProtocol) -> None:
        self._repository = repository

    async def _require_duration(self, service_id: str) -> int:
        duration = await self._repository.get_service_duration(service_id)
        if duration is None:
            raise ServiceNotFoundError(f"Service not found: {service_id}")
        return duration

    async def get_available_slots(
        self,
        *,
        date: str,
        barber_id: str,
        service_id: str,
        now: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """
        List the slot grid for a barber on a date, with availability flags.

        Returns an empty list when the service is unknown, the shop is closed
        that day, or the barber is absent all day or does not work that day.
        """
        duration = await self._repository.get_service_duration(service_id)
        if duration is None:
            logger.debug("Unknown service %s, no slots", service_id)
            return []

        business_date = parse_date_as_business_noon(date)
        weekday = day_of_week(business_date)

        shop_hours = await self._repository.get_shop_hours(weekday)
        if shop_hours is None or not shop_hours.is_open or not shop_hours.start_time or not shop_hours.end_time:
            logger.debug("Shop closed on %s (weekday %s)", date, weekday)
            return []

        closures = await self._repository.get_shop_closures(date)
        if any(isinstance(closure, FullDay) for closure in closures):
            logger.debug("Shop closed all day on %s", date)
            return []

        absences = await self._repository.get_barber_absences(barber_id, date)
        if any(isinstance(absence, FullDay) for absence in absences):
            logger.debug("Barber %s absent all day on %s", barber_id, date)
            return []

        working_hours = await self._repository.get_working_hours(barber_id, weekday)
        if working_hours is None:
            logger.debug("Barber %s does not work on weekday %s", barber_id, weekday)
            return []

        appointments = await self._repository.get_appointments(barber_id, date)

        slots = generate_time_slots(
            start_time=working_hours.start_time,
            end_time=working_hours.end_time,
            duration=duration,
            break_start=working_hours.break_start,
            break_end=working_hours.break_end,
        )
        slots = filter_slots_by_policy(
            slots,
            duration_minutes=duration,
            shop_hours=shop_hours,
            closures=closures,
            absences=absences,
        )
        slots = filter_available_slots(slots, appointments, service_duration=duration)
        slots = filter_past_slots(slots, business_date, now=now)

        logger.debug(
            "Computed %s slots (%s available) for barber %s on %s",
            len(slots),
            sum(1 for slot in slots if slot.available),
            barber_id,
            date,
        )
        return slots

    async def check_booking(
        self,
        *,
        date: str,
        barber_id: str,
        service_id: str,
        start_time: str,
        now: Optional[datetime] = None,
    ) -> Optional[BlockReason]:
        """
        Validate one proposed booking.

        Returns None when it may be booked, otherwise the first reason it
        cannot: SLOT_IN_PAST, then the policy reasons, then SLOT_OCCUPIED when
        it collides with a confirmed appointment.

        Raises:
            ServiceNotFoundError: If the service does not exist
        """
        duration = await self._require_duration(service_id)
        local_date = parse_local_date(date)

        if is_date_time_in_past(local_date, start_time, now=now):
            return BlockReason.SLOT_IN_PAST

        weekday = day_of_week(local_date)

        reason = get_booking_policy_error(
            start_time=start_time,
            duration_minutes=duration,
            working_hours=await self._repository.get_working_hours(barber_id, weekday),
            shop_hours=await self._repository.get_shop_hours(weekday),
            closures=await self._repository.get_shop_closures(date),
            absences=await self._repository.get_barber_absences(barber_id, date),
        )

        if reason is None:
            appointments = await self._repository.get_appointments(barber_id, date)
            if has_overlapping_appointment(appointments, start_time, calculate_end_time(start_time, duration)):
                reason = BlockReason.SLOT_OCCUPIED

        if reason is not None:
            logger.info("Booking %s %s for barber %s rejected: %s", date, start_time, barber_id, reason.value)
        return reason
