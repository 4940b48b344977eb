"""Single-job timer using APScheduler."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import structlog
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

log = structlog.get_logger()


class SchedulerError(Exception):
    """Raised when the timer is configured with invalid values."""

    pass


class JobTimer:
    """Timer holding at most one pending job.

    The timer starts single-shot (arm) and can be switched to repeating
    from inside its own callback (set_repeating). Every (re)arm replaces
    the job under the same id, so there is never a second concurrent timer.
    """

    JOB_ID = "scheduled_command"

    def __init__(
        self,
        callback: Callable[[], None],
        misfire_grace_time: int = 3600,  # 1 hour
        scheduler: Optional[BackgroundScheduler] = None,
    ) -> None:
        """Initialize timer.

        Args:
            callback: Function invoked on each firing
            misfire_grace_time: Seconds after the due time a late firing still runs
            scheduler: Pre-built APScheduler instance (created lazily if None)
        """
        self.misfire_grace_time = misfire_grace_time
        self._callback = callback
        self._scheduler = scheduler
        self._listening = False
        self.enabled = False
        self.is_repeating = False
        self.interval_ms = 0

    def _create_scheduler(self) -> BackgroundScheduler:
        """Create configured BackgroundScheduler."""
        job_defaults = {
            "coalesce": True,  # Combine missed runs into one
            "misfire_grace_time": self.misfire_grace_time,
            "max_instances": 1,  # Prevent overlapping runs
        }
        return BackgroundScheduler(timezone="UTC", job_defaults=job_defaults)

    def _on_job_error(self, event: Any) -> None:
        log.error("timer_callback_failed", error=str(event.exception))

    def _on_job_missed(self, event: Any) -> None:
        log.warning("timer_fire_missed", scheduled_for=str(event.scheduled_run_time))

    def _ensure_started(self) -> BackgroundScheduler:
        if self._scheduler is None:
            self._scheduler = self._create_scheduler()

        # Listeners survive shutdown and restart, attach them only once
        if not self._listening:
            self._scheduler.add_listener(self._on_job_error, EVENT_JOB_ERROR)
            self._scheduler.add_listener(self._on_job_missed, EVENT_JOB_MISSED)
            self._listening = True

        if not self._scheduler.running:
            self._scheduler.start()
            log.debug("timer_thread_started")
        return self._scheduler

    def arm(self, delay_ms: int) -> None:
        """Fire once after delay_ms milliseconds, replacing any pending job."""
        scheduler = self._ensure_started()
        delay_ms = max(1, int(delay_ms))
        run_date = datetime.now(timezone.utc) + timedelta(milliseconds=delay_ms)

        scheduler.add_job(
            self._callback,
            DateTrigger(run_date=run_date),
            id=self.JOB_ID,
            replace_existing=True,
        )
        self.interval_ms = delay_ms
        self.is_repeating = False
        self.enabled = True
        log.debug("timer_armed", delay_ms=delay_ms, run_date=run_date.isoformat())

    def set_repeating(self, interval_ms: int) -> None:
        """Switch to firing every interval_ms, starting one interval from now.

        Raises:
            SchedulerError: If interval_ms is not positive
        """
        if interval_ms <= 0:
            raise SchedulerError(f"Repeating interval must be positive, got {interval_ms} ms")

        scheduler = self._ensure_started()
        scheduler.add_job(
            self._callback,
            IntervalTrigger(seconds=interval_ms / 1000),
            id=self.JOB_ID,
            replace_existing=True,
        )
        self.interval_ms = interval_ms
        self.is_repeating = True
        self.enabled = True
        log.debug("timer_repeating", interval_ms=interval_ms)

    def disable(self) -> None:
        """Drop the pending job. Safe to call repeatedly."""
        if self._scheduler is not None:
            try:
                self._scheduler.remove_job(self.JOB_ID)
            except JobLookupError:
                pass
        self.enabled = False
        self.is_repeating = False
        log.debug("timer_disabled")

    def shutdown(self) -> None:
        """Stop the background thread without waiting for a running callback."""
        self.disable()
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            log.debug("timer_thread_stopped")
