"""Data models for Shell Scheduler."""

from .enums import LogLevel
from .log_entry import LogEntry

__all__ = [
    "LogEntry",
    "LogLevel",
]
