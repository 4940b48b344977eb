"""
Entry point for the shell-scheduler CLI.

Usage:
    shell-scheduler [COMMAND [INTERVAL [NEXT_RUN]]]   Start the interactive shell
    shell-scheduler COMMAND --run-once                  Execute once and exit
    shell-scheduler --help                              Show help message
    shell-scheduler --version                           Show version and exit

Exit Codes:
    0 - Success
    1 - Configuration or execution error
"""

from __future__ import annotations

import argparse
import functools
import sys
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from shell_scheduler.config import SchedulerSettings
    from shell_scheduler.scheduler import Scheduler

from shell_scheduler import __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="shell-scheduler",
        description="Run an external program once or on a fixed interval",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0   Success
  1   Configuration or execution error

Environment Variables:
  CONFIG_PATH                         Path to YAML configuration file
  SHELL_SCHEDULER_COMMAND_PATH        Executable to run
  SHELL_SCHEDULER_COMMAND_ARGS        JSON list of arguments
  SHELL_SCHEDULER_INTERVAL_MINUTES    Minutes between executions (0 = once)
  SHELL_SCHEDULER_NEXT_RUN_AT         First execution time
  SHELL_SCHEDULER_TIMEZONE            IANA timezone (default: system local)
  SHELL_SCHEDULER_LOG_LEVEL           Logging level: DEBUG, INFO, WARNING, ERROR
  SHELL_SCHEDULER_LOG_FORMAT          Log format: text or json

Examples:
  # Interactive shell, run backup.sh every 60 minutes starting at 22:00
  shell-scheduler /usr/local/bin/backup.sh 60 "22:00"

  # Execute once and exit
  shell-scheduler /usr/local/bin/backup.sh --run-once
""",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("command", nargs="?", help="Executable to run")
    parser.add_argument("interval", nargs="?", help="Execution interval in minutes")
    parser.add_argument("next_run", nargs="?", help="Date and time of the first execution")
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML configuration file (overrides CONFIG_PATH)",
    )
    parser.add_argument(
        "--run-once",
        action="store_true",
        help="Execute the command once and exit",
    )
    return parser.parse_args(argv)


def build_scheduler(config: "SchedulerSettings") -> "Scheduler":
    """Create a Scheduler writing its log entries through structlog."""
    from shell_scheduler.logs import StructlogSink
    from shell_scheduler.scheduler import JobTimer, Scheduler
    from shell_scheduler.utils.timestamps import resolve_timezone

    scheduler = Scheduler(
        sink=StructlogSink(),
        timer_factory=functools.partial(JobTimer, misfire_grace_time=config.misfire_grace_time),
        display_timezone=resolve_timezone(config.timezone),
    )
    scheduler.command_path = config.command_path
    scheduler.command_args = list(config.command_args)
    scheduler.interval_minutes = config.interval_minutes
    if config.next_run_at is not None:
        scheduler.next_run_at = config.next_run_at
    return scheduler


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for shell-scheduler.

    Returns:
        Exit code (0=success, 1=error)
    """
    args = parse_args(argv)

    # Import here to allow --help without dependencies
    from shell_scheduler.config.loader import ConfigurationError, load_config
    from shell_scheduler.logging import configure_logging, get_logger
    from shell_scheduler.shell import InteractiveShell

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except SystemExit as e:
        # Validation errors cause sys.exit(1) in loader
        return e.code if isinstance(e.code, int) else EXIT_ERROR

    configure_logging(log_format=config.log_format, log_level=config.log_level)
    log = get_logger()

    scheduler = build_scheduler(config)
    shell = InteractiveShell(scheduler)

    # Positional arguments override configuration
    if args.command:
        shell.set_command_path(args.command)
    if args.interval is not None:
        shell.set_interval(args.interval)
    if args.next_run is not None:
        shell.set_next_run_at(args.next_run)

    if args.run_once:
        log.info("run_once_mode", command=scheduler.command_path)
        try:
            ok = scheduler.run_once()
        finally:
            scheduler.close()
        return EXIT_SUCCESS if ok else EXIT_ERROR

    log.info("starting", version=__version__)
    shell.run()
    log.info("stopped")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
