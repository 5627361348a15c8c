"""Run-history housekeeping defaults."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import env_float

DEFAULT_STUCK_RUN_TIMEOUT_HOURS = 6.0
DEFAULT_RUN_RETENTION_DAYS = 30.0


@dataclass(frozen=True, slots=True)
class HousekeepingConfig:
    stuck_run_timeout: timedelta = timedelta(hours=DEFAULT_STUCK_RUN_TIMEOUT_HOURS)
    run_retention: timedelta = timedelta(days=DEFAULT_RUN_RETENTION_DAYS)


def get_housekeeping_config() -> HousekeepingConfig:
    return HousekeepingConfig(
        stuck_run_timeout=timedelta(
            hours=env_float("STUCK_RUN_TIMEOUT_HOURS", DEFAULT_STUCK_RUN_TIMEOUT_HOURS)
        ),
        run_retention=timedelta(days=env_float("RUN_RETENTION_DAYS", DEFAULT_RUN_RETENTION_DAYS)),
    )
