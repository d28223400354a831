"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.durations import is_valid_duration


class EngineConfig(BaseModel):
    """Tunables of the calendar engine."""
    grace_minutes: int = 5
    min_range_days: int = 10
    default_durations: List[int] = Field(default_factory=lambda: [15])
    hub_window_days: int = 8
    page_span_days: int = 7

    @field_validator("default_durations")
    @classmethod
    def validate_durations(cls, value: List[int]) -> List[int]:
        """Ensure default durations are non-empty multiples of 15."""
        if not value:
            raise ValueError("default_durations must not be empty")
        invalid = [d for d in value if not is_valid_duration(d)]
        if invalid:
            raise ValueError(f"default_durations must be multiples of 15, got {invalid}")
        return value

    @field_validator("grace_minutes")
    @classmethod
    def validate_grace(cls, value: int) -> int:
        if value < 0:
            raise ValueError("grace_minutes must not be negative")
        return value

    @field_validator("min_range_days", "hub_window_days", "page_span_days")
    @classmethod
    def validate_days(cls, value: int) -> int:
        """Ensure day counts are positive."""
        if value <= 0:
            raise ValueError(f"Day count must be greater than zero, got {value}")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    engine: EngineConfig = Field(default_factory=EngineConfig)
    display_timezone: str = "UTC"
    data_file: Optional[Path] = None

    @field_validator("display_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the display timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

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

        config = cls(**data)
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config

    def resolve_data_file(self, override: Optional[Path] = None) -> Path:
        """
        Pick the fixture file: an explicit override wins over the configured one.

        Raises:
            ValueError: If neither is set
        """
        data_file = override or self.data_file
        if data_file is None:
            raise ValueError("No data file configured. Pass --data or set data_file in config.yaml.")
        return data_file


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of meetcal/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
