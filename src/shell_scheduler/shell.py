"""Interactive command loop driving a single Scheduler.

Commands are read one per line:

    help   Show available commands
    set    Edit command, execution interval and next execution time
    list   Show current command, interval and next execution time
    once   Execute the command once
    start  Start scheduled execution
    stop   Stop scheduled execution
    time   Show current date and time
    exit   Close the application
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

import structlog

from shell_scheduler.scheduler import Scheduler

log = structlog.get_logger()

HELP_LINES = [
    "Available commands",
    " set   - Edit current command, execution interval, and next execution time.",
    " list  - Show current command, execution interval, and next execution time.",
    " once  - Execute specified command once.",
    " start - Start scheduled execution of specified command.",
    " stop  - Stop scheduled execution of specified command.",
    " time  - Shows current date and time.",
    " exit  - Close this application.",
]


class InteractiveShell:
    """Console front end that owns one Scheduler.

    Run-once executions are handed to a single worker thread so a slow
    command does not freeze the prompt.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.scheduler = scheduler
        self._input = input_func
        self._output = output
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._executor: Optional[ThreadPoolExecutor] = None
        self.pending: Optional[Future] = None
        self._commands: Dict[str, Callable[[], None]] = {
            "help": self.show_help,
            "set": self.set_parameters,
            "list": self.show_parameters,
            "once": self.execute_once,
            "start": self.start_schedule,
            "stop": self.stop_schedule,
            "time": self.show_time,
        }

    def write(self, text: str) -> None:
        self._output(text)

    def _read(self, prompt: str = "") -> Optional[str]:
        """Read one line; None at end of input."""
        try:
            return self._input(prompt)
        except EOFError:
            return None

    # Parameter setters

    def set_command_path(self, value: str) -> None:
        self.write(f"Setting command to '{value}'.")
        self.scheduler.command_path = value.strip() or None

    def set_interval(self, value: Optional[str]) -> None:
        """Set interval from user text; anything unparseable means run once."""
        try:
            interval = int(str(value).strip())
        except (TypeError, ValueError):
            interval = 0

        if interval > 0:
            self.write(f"Setting execution interval to {interval} minutes.")
        else:
            self.write("Defaulting to execute only once.")
            interval = 0
        self.scheduler.interval_minutes = interval

    def set_next_run_at(self, value: Optional[str]) -> None:
        """Set next execution from user text; unparseable text means now."""
        try:
            self.scheduler.next_run_at = value
            self.write(f"Next execution at {self.scheduler.format_time(self.scheduler.next_run_at)}.")
        except ValueError as e:
            self.write(f"Could not convert given execution time '{value}': {e}")
            self.write("Defaulting to execute now.")
            self.scheduler.next_run_at = self._clock()

    # Commands

    def show_help(self) -> None:
        for line in HELP_LINES:
            self.write(line)

    def show_parameters(self) -> None:
        s = self.scheduler
        self.write(f"Current command is '{s.command_path}'.")
        if s.command_args:
            self.write(f"Current arguments are {' '.join(s.command_args)}.")
        self.write(f"Current execution interval is {s.interval_minutes} (minutes).")
        self.write(f"Next scheduled execution at {s.format_time(s.next_run_at)}.")
        state = "is currently" if s.is_scheduled else "is not"
        self.write(f"Execution {state} scheduled.")

    def show_time(self) -> None:
        self.write(f"Current date and time is: {self.scheduler.format_time(self._clock())}.")

    def set_parameters(self) -> None:
        s = self.scheduler

        command = self._read(f"New command (<Enter> to keep current command '{s.command_path}'): ")
        if command:
            self.set_command_path(command)
        else:
            self.write(f"Keeping old command '{s.command_path}'.")

        minutes = self._read(
            f"New execution interval (<Enter> to keep current interval of {s.interval_minutes} minutes): "
        )
        if minutes:
            self.set_interval(minutes)
        else:
            self.write(f"Keeping old execution interval of {s.interval_minutes} minutes.")

        next_run = self._read(
            "New next scheduled execution (<Enter> to keep current next scheduled "
            f"execution at {s.format_time(s.next_run_at)}): "
        )
        if next_run:
            self.set_next_run_at(next_run)
        else:
            self.write(f"Keeping old scheduled execution at {s.format_time(s.next_run_at)}.")

    def _require_command(self) -> bool:
        if self.scheduler.command_path:
            return True
        self.write("No command specified.")
        command = self._read("Please enter command to be executed: ")
        if command and command.strip():
            self.set_command_path(command)
            return True
        return False

    def execute_once(self) -> None:
        if not self._require_command():
            return
        if self.pending is not None and not self.pending.done():
            self.write("A previous execution is still running.")
            return

        self.write(f"Executing '{self.scheduler.command_path}' once.")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="run-once")
        self.pending = self._executor.submit(self.scheduler.run_once)

    def start_schedule(self) -> None:
        if not self._require_command():
            return

        s = self.scheduler
        if s.interval_minutes <= 0:
            self.write("Current execution interval is set to 0.")
            self.set_interval(self._read("Please enter execution interval: "))
            if s.interval_minutes <= 0:
                self.execute_once()
                return

        self.write(
            f"Scheduling execution of '{s.command_path}' every {s.interval_minutes} minutes."
        )
        self.write(f"Next execution at {s.format_time(s.next_run_at)}.")
        s.schedule_execution()

    def stop_schedule(self) -> None:
        self.scheduler.stop_scheduled_execution()

    # Loop

    def handle(self, command: str) -> bool:
        """Dispatch one command line. Returns False when the loop should end."""
        command = command.strip()
        if command == "exit":
            return False
        if not command:
            return True

        handler = self._commands.get(command)
        if handler is None:
            self.write(f"Invalid command '{command}'")
            self.write(" Try 'help' for a list of all available commands.")
            return True

        log.debug("shell_command", command=command)
        handler()
        return True

    def run(self) -> None:
        """Read and dispatch commands until 'exit' or end of input."""
        self.write("-= Welcome to the Shell Scheduler =-")
        try:
            while True:
                line = self._read()
                if line is None or not self.handle(line):
                    break
        except KeyboardInterrupt:
            log.info("shell_shutdown", reason="keyboard interrupt")
        finally:
            self.close()

    def close(self) -> None:
        """Wait for a running run-once execution and release the scheduler."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.scheduler.close()
