"""
Shell Scheduler - Run an external program once or on a fixed interval.

This package provides the scheduling and execution engine behind an
interactive console tool: it launches a command, captures its output into
log entries, and re-arms itself for the next interval.

Features:
- Configuration via YAML with environment variable overrides
- Structured logging (JSON for production, colored text for the console)
- Single-job timer built on APScheduler with cancel semantics
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
