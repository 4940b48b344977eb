"""Tests for log sinks."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from shell_scheduler.logs import LogSink, MemorySink, StructlogSink
from shell_scheduler.models import LogEntry, LogLevel


class TestMemorySink:
    """Tests for MemorySink."""

    def test_collects_in_order(self) -> None:
        """Entries are kept in arrival order."""
        sink = MemorySink()
        first = LogEntry(message="one")
        second = LogEntry(message="two", level=LogLevel.ERROR)

        sink.accept(first)
        sink.accept(second)

        assert sink.entries == [first, second]
        assert len(sink) == 2
        assert list(sink) == [first, second]

    def test_by_level(self) -> None:
        """by_level() filters entries."""
        sink = MemorySink()
        sink.accept(LogEntry(message="a"))
        sink.accept(LogEntry(message="b", level=LogLevel.WARNING))
        sink.accept(LogEntry(message="c", level=LogLevel.WARNING))

        assert [e.message for e in sink.by_level(LogLevel.WARNING)] == ["b", "c"]
        assert sink.by_level(LogLevel.ERROR) == []

    def test_clear(self) -> None:
        """clear() drops everything."""
        sink = MemorySink()
        sink.accept(LogEntry(message="a"))

        sink.clear()

        assert len(sink) == 0

    def test_satisfies_protocol(self) -> None:
        """MemorySink is a LogSink."""
        assert isinstance(MemorySink(), LogSink)


class TestStructlogSink:
    """Tests for StructlogSink."""

    def test_level_mapping(self) -> None:
        """Entry levels map to structlog methods."""
        logger = MagicMock()
        sink = StructlogSink(logger=logger)
        ts = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)

        sink.accept(LogEntry(message="out", timestamp=ts))
        sink.accept(LogEntry(message="warn", level=LogLevel.WARNING, timestamp=ts))
        sink.accept(LogEntry(message="err", level=LogLevel.ERROR, timestamp=ts))

        logger.info.assert_called_once_with("out", logged_at=ts.isoformat())
        logger.warning.assert_called_once_with("warn", logged_at=ts.isoformat())
        logger.error.assert_called_once_with("err", logged_at=ts.isoformat())

    def test_default_logger_writes_output(self, capsys) -> None:
        """Without a logger the default structlog output is used."""
        sink = StructlogSink()

        sink.accept(LogEntry(message="visible line"))

        captured = capsys.readouterr()
        assert "visible line" in captured.out

    def test_satisfies_protocol(self) -> None:
        """StructlogSink is a LogSink."""
        assert isinstance(StructlogSink(logger=MagicMock()), LogSink)
