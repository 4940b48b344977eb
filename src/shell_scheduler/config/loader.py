"""Configuration loading with YAML and environment override support."""

from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from shell_scheduler.config.settings import SchedulerSettings

VALUE_ERROR_PREFIX = "Value error, "


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


def env_var_for(field: str) -> str:
    """Environment variable that overrides the given setting."""
    return f"{SchedulerSettings.model_config['env_prefix']}{field.upper()}"


def load_yaml_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Read the schedule file named by config_path or CONFIG_PATH.

    An empty file is an empty schedule. Anything other than a mapping of
    known setting names is rejected, so a misspelled key such as
    ``interval:`` fails loudly instead of leaving the command to run once.

    Args:
        config_path: Path to YAML config file. If None, checks CONFIG_PATH env var.

    Returns:
        Setting values from the file, or empty dict if there is no file.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not valid YAML,
            not a mapping, or names settings that do not exist.
    """
    path = config_path or os.environ.get("CONFIG_PATH")
    if not path:
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}\n"
            "Point CONFIG_PATH or --config at an existing file, or leave both unset."
        )
    except PermissionError:
        raise ConfigurationError(f"Cannot read configuration file {path}: permission denied")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must map setting names to values, "
            f"got a {type(data).__name__}"
        )

    known = SchedulerSettings.model_fields
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        raise ConfigurationError(
            f"Unknown setting(s) in {path}: {', '.join(unknown)}. "
            f"Known settings: {', '.join(known)}"
        )
    return data


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """Turn pydantic errors into one line per bad setting.

    Each line names the setting (with the list index for command_args),
    the reason, the rejected value, and where the value can be changed.
    """
    messages: List[str] = []
    for error in errors:
        loc = tuple(error.get("loc", ()))
        reason = str(error.get("msg", "Invalid value"))
        if reason.startswith(VALUE_ERROR_PREFIX):
            reason = reason[len(VALUE_ERROR_PREFIX):]

        if not loc:
            messages.append(f"Invalid configuration: {reason}")
            continue

        field = str(loc[0])
        where = field + "".join(f"[{part}]" for part in loc[1:])
        line = f"Invalid setting '{where}': {reason}"
        if "input" in error and error.get("type") != "missing":
            line += f" (got {error['input']!r})"
        line += f". Check {env_var_for(field)} or '{field}:' in the config file."
        messages.append(line)

    return messages


def load_config(config_path: Optional[str] = None) -> SchedulerSettings:
    """Load and validate configuration.

    Configuration is loaded with the following precedence:
    1. Environment variables (highest priority)
    2. .env file
    3. YAML configuration file
    4. Default values (lowest priority)

    Args:
        config_path: Optional path to YAML config file (sets CONFIG_PATH env).

    Returns:
        Validated SchedulerSettings instance.

    Raises:
        ConfigurationError: If configuration file cannot be read.
        SystemExit: If validation fails (exits with code 1 after printing errors).
    """
    if config_path:
        os.environ["CONFIG_PATH"] = config_path

    # Surface file errors here; the settings source silently ignores them
    _ = load_yaml_config()

    try:
        return SchedulerSettings()
    except ValidationError as e:
        for msg in format_validation_errors(e.errors()):
            print(msg, file=sys.stderr)
        sys.exit(1)
