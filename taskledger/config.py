"""
Centralized configuration for TaskLedger.

All values that vary by deployment belong here. Each setting can come from an
environment variable, the YAML config file, or the built-in default, in that
order of precedence.
"""

import logging
import os
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from . import paths
from .errors import ConfigError

logger = logging.getLogger(__name__)

# setting name -> (env var, caster)
_ENV_OVERRIDES: dict[str, tuple[str, Any]] = {
    "db_path": (paths.APP_ENV_DB, str),
    "report_timezone": ("TASKLEDGER_REPORT_TZ", str),
    "report_period_days": ("TASKLEDGER_REPORT_PERIOD", int),
    "report_task_limit": ("TASKLEDGER_REPORT_TASK_LIMIT", int),
    "cors_origins": ("CORS_ORIGINS", str),
    "log_level": ("TASKLEDGER_LOG_LEVEL", str),
    "log_json": ("TASKLEDGER_LOG_JSON", lambda v: v.strip().lower() in ("1", "true", "yes")),
}


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    db_path: str
    report_timezone: str = "UTC"
    report_period_days: int = 7
    report_task_limit: int = 100
    cors_origins: str = "*"
    log_level: str = "INFO"
    log_json: bool | None = None

    @property
    def report_tz(self) -> ZoneInfo:
        """Zone used for calendar boundaries in reports."""
        try:
            return ZoneInfo(self.report_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown report timezone: {self.report_timezone!r}") from e

    @property
    def cors_origin_list(self) -> list[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load the YAML config file.

    Args:
        path: Config file location

    Returns:
        Mapping of setting names to values; empty when the file is absent.

    Raises:
        ConfigError: If the file exists but is not a valid YAML mapping.
    """
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_settings(config_path: Path | None = None) -> Settings:
    """Build Settings from defaults, the YAML file and the environment."""
    config_path = config_path or paths.config_file_path()
    file_values = load_config_file(config_path)

    known = {f.name for f in fields(Settings)}
    unknown = set(file_values) - known
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_path}: {sorted(unknown)}")

    values: dict[str, Any] = {k: v for k, v in file_values.items() if k in known}

    for name, (env_var, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_var)
        if raw is None or raw == "":
            continue
        try:
            values[name] = cast(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {env_var}: {raw!r}") from e

    if "db_path" not in values:
        values["db_path"] = str(paths.db_path())

    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (loaded once)."""
    return load_settings()


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads them."""
    get_settings.cache_clear()
