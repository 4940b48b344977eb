"""Scheduler core: run a command once or on a fixed interval."""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Callable, List, Optional, Sequence

import structlog

from shell_scheduler.logs.sink import LogSink
from shell_scheduler.models import LogEntry, LogLevel
from shell_scheduler.scheduler.process import ExecutionResult, execute_application
from shell_scheduler.scheduler.timer import JobTimer
from shell_scheduler.utils.timestamps import normalize_timestamp, resolve_timezone

log = structlog.get_logger()

MS_PER_MINUTE = 60 * 1000

TimerFactory = Callable[[Callable[[], None]], Any]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Scheduler:
    """Owns one schedule and the timer that drives it.

    Supports:
    - Run-once execution (blocking, returns success)
    - Scheduled execution: wait until next_run_at, then repeat every
      interval_minutes; an interval of 0 or less means run once
    - Cooperative stop, re-checked inside the timer callback

    Every outcome is reported to the sink as LogEntry objects; none of the
    public operations raise.
    """

    def __init__(
        self,
        sink: LogSink,
        timer_factory: Optional[TimerFactory] = None,
        clock: Optional[Clock] = None,
        display_timezone: Optional[tzinfo] = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            sink: Receives every log entry the scheduler produces
            timer_factory: Builds the timer from a callback (default JobTimer)
            clock: Returns the current aware datetime (default UTC now)
            display_timezone: Timezone for times in messages and for naive
                next_run_at values (default system local)
        """
        self._sink = sink
        self._timer_factory: TimerFactory = timer_factory or JobTimer
        self._clock: Clock = clock or _utcnow
        self.display_timezone = display_timezone or resolve_timezone()
        self._timer: Optional[Any] = None

        self._is_scheduled = False
        self.command_path: Optional[str] = None
        self.command_args: List[str] = []
        self.interval_minutes = 0
        self._next_run_at = self._clock()

    @property
    def is_scheduled(self) -> bool:
        """Whether a pending timer is armed."""
        return self._is_scheduled

    @property
    def next_run_at(self) -> datetime:
        """Date and time of the next scheduled execution (aware, UTC)."""
        return self._next_run_at

    @next_run_at.setter
    def next_run_at(self, value: Any) -> None:
        # Never in the past: clamp to now at write time
        when = normalize_timestamp(value, default_tz=self.display_timezone)
        now = self._clock()
        self._next_run_at = now if when < now else when

    def format_time(self, value: datetime) -> str:
        """Render an aware datetime in the display timezone."""
        return value.astimezone(self.display_timezone).strftime("%Y-%m-%d %H:%M:%S")

    def _emit(self, message: str, level: LogLevel = LogLevel.MESSAGE) -> None:
        self._sink.accept(LogEntry(message=message, level=level))

    def _execute(self, args: Optional[Sequence[str]] = None) -> ExecutionResult:
        return execute_application(
            self.command_path,
            args if args is not None else self.command_args,
            sink=self._sink,
        )

    def run_once(self) -> bool:
        """Execute the configured command once and wait for it to finish.

        Returns:
            False if no command is set or the launch failed, True otherwise
        """
        log.info("run_once", command=self.command_path)
        return self._execute().success

    def schedule_execution(self) -> bool:
        """Execute the configured command at next_run_at, then every interval.

        With an interval of 0 or less this is the same as run_once().

        Returns:
            False if no command is set (nothing is logged), otherwise True
            for a scheduled run or the run_once() result
        """
        if not self.command_path:
            log.debug("schedule_rejected", reason="no command path")
            return False

        if self.interval_minutes <= 0:
            return self.run_once()

        delay = self._next_run_at - self._clock()
        initial_delay_ms = max(1, int(delay.total_seconds() * 1000))

        if self._timer is None:
            self._timer = self._timer_factory(self._on_timer_fired)
        self._timer.arm(initial_delay_ms)
        self._is_scheduled = True

        log.info(
            "execution_scheduled",
            command=self.command_path,
            interval_minutes=self.interval_minutes,
            initial_delay_ms=initial_delay_ms,
        )
        return True

    def stop_scheduled_execution(self) -> None:
        """Prevent future firings. A running process is not interrupted."""
        if self._timer is None:
            self._emit(
                "Scheduled execution was not started. Nothing to stop.",
                LogLevel.WARNING,
            )
            return

        self._timer.disable()
        self._is_scheduled = False
        self._emit(f"Stopping scheduled execution of '{self.command_path}'.")

    def close(self) -> None:
        """Release the timer thread, if one was ever started."""
        self._is_scheduled = False
        if self._timer is not None:
            self._timer.shutdown()

    def _on_timer_fired(self) -> None:
        timer = self._timer
        if timer is None:
            return

        # Stop requested after arming but before firing
        if not self._is_scheduled:
            timer.disable()
            return

        # First firing: from time-until-first-run to time-between-runs
        if not timer.is_repeating and self.interval_minutes > 0:
            timer.set_repeating(self.interval_minutes * MS_PER_MINUTE)

        self._emit(
            f"Executing '{self.command_path}' scheduled for "
            f"{self.format_time(self._next_run_at)}..."
        )
        try:
            self._execute()
        except Exception as e:
            log.error("scheduled_run_failed", command=self.command_path, error=str(e))
            self._emit(
                f"Exception trying to execute '{self.command_path}': {e}",
                LogLevel.ERROR,
            )

        if self.interval_minutes > 0:
            try:
                # Fixed cadence: advance from the previous scheduled time
                self.next_run_at = self._next_run_at + timedelta(minutes=self.interval_minutes)
            except (OverflowError, ValueError) as e:
                log.error("schedule_advance_failed", command=self.command_path, error=str(e))
                self._emit(
                    f"Cannot schedule next execution of '{self.command_path}': {e}",
                    LogLevel.ERROR,
                )
                self._finish(timer)
                return
            self._emit(
                f"Scheduled next execution of '{self.command_path}' for "
                f"{self.format_time(self._next_run_at)}."
            )
        else:
            self._emit("No further executions scheduled.")
            self._finish(timer)

    def _finish(self, timer: Any) -> None:
        timer.disable()
        self._is_scheduled = False
