"""
Service layer helpers that orchestrate repositories and domain logic.
"""

from .availability import AvailabilityService
from .financial import FinancialService
from .repository import ScheduleRepositoryProtocol

__all__ = ["AvailabilityService", "FinancialService", "ScheduleRepositoryProtocol"]
