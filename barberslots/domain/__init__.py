"""
Domain layer - Pure scheduling logic without external dependencies (no I/O).
"""

from .availability_policy import (
    get_absence_slot_error,
    get_booking_policy_error,
    get_shop_slot_error,
    get_working_hours_slot_error,
)
from .hours import AvailableHours, OccupancyStats, calculate_available_hours
from .models import (
    AppointmentRecord,
    AppointmentStatus,
    BlockedWindow,
    BlockReason,
    ExistingAppointment,
    FullDay,
    PartialDay,
    ShopHours,
    TimeRange,
    TimeSlot,
    WorkingHoursWindow,
    blocked_window,
)
from .slot_filters import (
    filter_available_slots,
    filter_past_slots,
    filter_slots_by_policy,
    has_overlapping_appointment,
)
from .slot_generator import generate_time_slots, get_available_slots

__all__ = [
    "AppointmentRecord",
    "AppointmentStatus",
    "AvailableHours",
    "BlockedWindow",
    "BlockReason",
    "ExistingAppointment",
    "FullDay",
    "OccupancyStats",
    "PartialDay",
    "ShopHours",
    "TimeRange",
    "TimeSlot",
    "WorkingHoursWindow",
    "blocked_window",
    "calculate_available_hours",
    "filter_available_slots",
    "filter_past_slots",
    "filter_slots_by_policy",
    "generate_time_slots",
    "get_absence_slot_error",
    "get_available_slots",
    "get_booking_policy_error",
    "get_shop_slot_error",
    "get_working_hours_slot_error",
    "has_overlapping_appointment",
]
