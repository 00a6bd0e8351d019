"""
Domain-specific exception hierarchy for the barberslots application.

Availability outcomes ("slot taken", "shop closed", ...) are never raised;
they are returned as ``BlockReason`` values. Exceptions are reserved for
broken inputs and missing records.
"""


class BarberSlotsError(Exception):
    """Base class for all application-level errors."""


class ScheduleDataError(BarberSlotsError):
    """Raised when schedule data cannot be loaded or fails validation."""


class ServiceNotFoundError(BarberSlotsError):
    """Raised when a booking references an unknown service."""


class BarberNotFoundError(BarberSlotsError):
    """Raised when a report references an unknown or inactive barber."""
