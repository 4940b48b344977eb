"""Configuration management for Shell Scheduler."""

from shell_scheduler.config.loader import ConfigurationError, load_config
from shell_scheduler.config.settings import SchedulerSettings

__all__ = [
    "ConfigurationError",
    "SchedulerSettings",
    "load_config",
]
