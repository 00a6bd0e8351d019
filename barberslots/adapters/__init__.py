"""
Adapters layer - Schedule data sources.
"""

from .records import ScheduleData
from .yaml_repository import YamlScheduleRepository

__all__ = ["ScheduleData", "YamlScheduleRepository"]
