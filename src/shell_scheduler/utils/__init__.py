"""Utility helpers for Shell Scheduler."""

from shell_scheduler.utils.timestamps import normalize_timestamp, resolve_timezone

__all__ = ["normalize_timestamp", "resolve_timezone"]
