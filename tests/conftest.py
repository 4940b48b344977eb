"""Shared fixtures for Shell Scheduler tests."""

import sys
from datetime import datetime, timedelta, timezone
from typing import Callable, List

import pytest
import structlog

from shell_scheduler.logs import MemorySink
from shell_scheduler.scheduler import Scheduler

PYTHON = sys.executable


class FakeClock:
    """Controllable replacement for the scheduler clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTimer:
    """Records what the scheduler asks of its timer; fire() runs the callback."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.enabled = False
        self.is_repeating = False
        self.interval_ms = 0
        self.arm_calls: List[int] = []
        self.repeating_calls: List[int] = []
        self.disable_calls = 0
        self.shutdown_called = False

    def arm(self, delay_ms: int) -> None:
        self.arm_calls.append(delay_ms)
        self.interval_ms = delay_ms
        self.is_repeating = False
        self.enabled = True

    def set_repeating(self, interval_ms: int) -> None:
        self.repeating_calls.append(interval_ms)
        self.interval_ms = interval_ms
        self.is_repeating = True
        self.enabled = True

    def disable(self) -> None:
        self.disable_calls += 1
        self.enabled = False
        self.is_repeating = False

    def shutdown(self) -> None:
        self.shutdown_called = True
        self.disable()

    def fire(self) -> None:
        self.callback()


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog configuration from leaking between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def timers() -> List[FakeTimer]:
    """Every FakeTimer created by the scheduler fixture."""
    return []


@pytest.fixture
def scheduler(sink: MemorySink, clock: FakeClock, timers: List[FakeTimer]) -> Scheduler:
    def factory(callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(callback)
        timers.append(timer)
        return timer

    return Scheduler(
        sink=sink,
        timer_factory=factory,
        clock=clock,
        display_timezone=timezone.utc,
    )


@pytest.fixture
def python_command(scheduler: Scheduler) -> Callable[[str], Scheduler]:
    """Point the scheduler at the current interpreter running a snippet."""

    def configure(code: str) -> Scheduler:
        scheduler.command_path = PYTHON
        scheduler.command_args = ["-c", code]
        return scheduler

    return configure
