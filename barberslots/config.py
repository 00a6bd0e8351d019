"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.cancellation import CANCELLATION_BLOCK_WINDOW_MINUTES
from .domain.dates import BUSINESS_TIMEZONE
from .domain.slot_generator import DEFAULT_SLOT_DURATION_MINUTES


class DefaultsConfig(BaseModel):
    """Default settings for slot listing and cancellation."""
    duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES
    cancellation_window_minutes: int = CANCELLATION_BLOCK_WINDOW_MINUTES

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    @field_validator("cancellation_window_minutes")
    @classmethod
    def validate_window(cls, value: int) -> int:
        if value < 0:
            raise ValueError("cancellation_window_minutes must not be negative")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    data_file: Path = Path("schedule.yaml")
    timezone: str = BUSINESS_TIMEZONE
    log_level: str = "WARNING"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """The business runs in one civil timezone; it is not configurable."""
        if value != BUSINESS_TIMEZONE:
            raise ValueError(f"timezone must be {BUSINESS_TIMEZONE}, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def resolve_data_file(self, config_path: Optional[Path] = None) -> Path:
        """Resolve ``data_file`` relative to the config file location."""
        if self.data_file.is_absolute() or config_path is None:
            return self.data_file
        return config_path.parent / self.data_file

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of barberslots/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
