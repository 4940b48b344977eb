"""Subprocess execution with output capture.

Runs an executable directly (never through a shell), waits for it to
exit, and turns its standard streams into log entries. Launch failures are
reported through ExecutionResult instead of raised.
"""

import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog

from shell_scheduler.logs.sink import LogSink
from shell_scheduler.models import LogEntry, LogLevel

log = structlog.get_logger()


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a single application run."""

    success: bool
    """Whether the process was launched and its output collected."""

    returncode: Optional[int] = None
    """Exit code of the process, None if it never started."""

    stdout: str = ""
    stderr: str = ""

    error: Optional[str] = None
    """Failure description when success is False."""

    def __bool__(self) -> bool:
        return self.success


def _build_argv(app_path: str, args: Optional[Sequence[str]]) -> List[str]:
    return [app_path, *(args or [])]


def execute_application(
    app_path: Optional[str],
    args: Optional[Sequence[str]] = None,
    sink: Optional[LogSink] = None,
) -> ExecutionResult:
    """Execute the application at app_path and capture its output.

    Blocks until the process exits. Standard output becomes one MESSAGE
    entry and standard error one ERROR entry, each only when non-blank
    after trimming. A non-zero exit code still counts as success.

    Args:
        app_path: Path (or PATH-resolvable name) of the executable
        args: Optional argument list passed to the executable
        sink: Receives the produced log entries

    Returns:
        ExecutionResult describing the run
    """

    def emit(message: str, level: LogLevel) -> None:
        if sink is not None:
            sink.accept(LogEntry(message=message, level=level))

    if not app_path:
        error = "No command specified."
        log.debug("execution_rejected", reason="no command path")
        emit(error, LogLevel.ERROR)
        return ExecutionResult(success=False, error=error)

    argv = _build_argv(app_path, args)
    log.debug("process_starting", argv=argv)

    try:
        completed = subprocess.run(
            argv,
            shell=False,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except Exception as e:
        error = f"Exception trying to execute '{app_path}': {e}"
        log.debug("process_launch_failed", app_path=app_path, error=str(e))
        emit(error, LogLevel.ERROR)
        return ExecutionResult(success=False, error=error)

    stdout = (completed.stdout or "").strip()
    stderr = (completed.stderr or "").strip()

    if stdout:
        emit(stdout, LogLevel.MESSAGE)
    if stderr:
        emit(stderr, LogLevel.ERROR)

    log.debug(
        "process_exited",
        app_path=app_path,
        returncode=completed.returncode,
        stdout_chars=len(stdout),
        stderr_chars=len(stderr),
    )
    return ExecutionResult(
        success=True,
        returncode=completed.returncode,
        stdout=stdout,
        stderr=stderr,
    )
