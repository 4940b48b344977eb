"""Shared enumerations for the Shell Scheduler models."""

from enum import Enum


class LogLevel(str, Enum):
    """Severity of a log entry produced by the scheduler."""

    ERROR = "error"
    WARNING = "warning"
    MESSAGE = "message"
