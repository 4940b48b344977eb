"""Scheduling and execution engine."""

from shell_scheduler.scheduler.process import ExecutionResult, execute_application
from shell_scheduler.scheduler.runner import Scheduler
from shell_scheduler.scheduler.timer import JobTimer, SchedulerError

__all__ = [
    "ExecutionResult",
    "JobTimer",
    "Scheduler",
    "SchedulerError",
    "execute_application",
]
