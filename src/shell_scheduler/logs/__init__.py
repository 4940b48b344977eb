"""Log sinks for scheduler output."""

from shell_scheduler.logs.sink import LogSink, MemorySink, StructlogSink

__all__ = ["LogSink", "MemorySink", "StructlogSink"]
