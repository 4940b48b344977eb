"""Log sinks that receive entries produced by the scheduler.

The scheduler only depends on the LogSink Protocol. How entries are
rendered (colored console, JSON lines, an in-memory list) is up to the
sink implementation.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Protocol, runtime_checkable

import structlog

from shell_scheduler.models import LogEntry, LogLevel


@runtime_checkable
class LogSink(Protocol):
    """Protocol for log entry consumers.

    accept() is fire-and-forget: it returns nothing and the scheduler does
    not expect it to report failures.
    """

    def accept(self, entry: LogEntry) -> None:
        """Receive a single log entry."""
        ...


class StructlogSink:
    """Forward log entries to a structlog logger.

    With the text log format the console renderer colors entries by level,
    errors red and warnings yellow.
    """

    def __init__(self, logger: Optional[Any] = None) -> None:
        self._log = logger if logger is not None else structlog.get_logger("shell_scheduler.output")

    def accept(self, entry: LogEntry) -> None:
        if entry.level == LogLevel.ERROR:
            emit = self._log.error
        elif entry.level == LogLevel.WARNING:
            emit = self._log.warning
        else:
            emit = self._log.info
        emit(entry.message, logged_at=entry.timestamp.isoformat())


class MemorySink:
    """Collect log entries in a list."""

    def __init__(self) -> None:
        self.entries: List[LogEntry] = []

    def accept(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def by_level(self, level: LogLevel) -> List[LogEntry]:
        """Return collected entries of the given level, oldest first."""
        return [e for e in self.entries if e.level == level]

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries)
