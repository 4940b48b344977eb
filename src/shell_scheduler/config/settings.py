"""Pydantic settings models for Shell Scheduler configuration."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple, Type
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads values from a YAML file.

    The YAML file path is determined by the CONFIG_PATH environment variable.
    """

    def get_field_value(
        self, field: Any, field_name: str
    ) -> Tuple[Any, str, bool]:
        """Get field value from YAML config."""
        yaml_config = self._load_yaml_config()
        field_value = yaml_config.get(field_name)
        return field_value, field_name, False

    def _load_yaml_config(self) -> Dict[str, Any]:
        """Load YAML configuration file."""
        config_path = os.environ.get("CONFIG_PATH")
        if not config_path:
            return {}

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (FileNotFoundError, yaml.YAMLError, PermissionError):
            # Errors will be handled by loader.py
            return {}

    def __call__(self) -> Dict[str, Any]:
        """Return the YAML config values."""
        return self._load_yaml_config()


class SchedulerSettings(BaseSettings):
    """Shell Scheduler configuration settings.

    Configuration is loaded in the following precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (SHELL_SCHEDULER_ prefix)
    3. .env file
    4. YAML configuration file (via CONFIG_PATH)
    5. Default values

    Command line arguments are applied on top by the entry point.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHELL_SCHEDULER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Schedule settings
    command_path: Optional[str] = Field(
        default=None,
        description="Executable to run (absolute path or name on PATH)",
    )
    command_args: List[str] = Field(
        default_factory=list,
        description="Arguments passed to the executable",
    )
    interval_minutes: int = Field(
        default=0,
        description="Minutes between executions (0 or less = run once)",
    )
    next_run_at: Optional[datetime] = Field(
        default=None,
        description="First scheduled execution (defaults to now)",
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for displayed and naive times (default: system local)",
    )
    misfire_grace_time: int = Field(
        default=3600,
        description="Seconds after the due time a delayed execution still runs",
        gt=0,
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format: json (machine readable) or text (console)",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to set precedence.

        Order (first = highest priority):
        1. init_settings (constructor arguments)
        2. env_settings (environment variables with SHELL_SCHEDULER_ prefix)
        3. dotenv_settings (.env file)
        4. yaml_settings (CONFIG_PATH YAML file)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized == "WARN":
            normalized = "WARNING"
        if normalized not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: DEBUG, INFO, WARNING, ERROR"
            )
        return normalized

    @field_validator("command_path")
    @classmethod
    def validate_command_path(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; a blank path means no command."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Validate timezone name against the IANA database."""
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v.strip())
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{v}'. Use an IANA name like 'Europe/Berlin'")
        return v.strip()
