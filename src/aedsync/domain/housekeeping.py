"""Run-history housekeeping: fail stuck runs and prune old ones."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from aedsync.domain.runs import RunStatus

if TYPE_CHECKING:
    from aedsync.domain.ports import RunStore

log = getLogger(__name__)

STUCK_RUN_MESSAGE: Final = "Run marked as failed by cleanup task due to timeout"
DEFAULT_STUCK_RUN_TIMEOUT: Final = timedelta(hours=6)
DEFAULT_RUN_RETENTION: Final = timedelta(days=30)


@dataclass(slots=True)
class CleanupResult:
    failed_runs: int = 0
    deleted_runs: int = 0


def fail_stuck_runs(
    run_store: RunStore,
    *,
    timeout: timedelta = DEFAULT_STUCK_RUN_TIMEOUT,
    now: datetime | None = None,
) -> int:
    """Complete ``running`` runs older than ``timeout`` as failed; returns how many."""

    current = now or datetime.now(tz=UTC)
    runs = run_store.list_running_runs()
    log.debug("Found %d running runs", len(runs))
    failed = 0
    for run in runs:
        age = current - run.started_at
        if age <= timeout:
            continue
        log.info("Cleaning up stuck run %s (running for %s)", run.id, age)
        try:
            run_store.complete_run(run.id, RunStatus.FAILED, error_message=STUCK_RUN_MESSAGE)
        except Exception:
            log.exception("Failed to clean up run %s", run.id)
            continue
        failed += 1
    return failed


def prune_old_runs(
    run_store: RunStore,
    *,
    retention: timedelta = DEFAULT_RUN_RETENTION,
    now: datetime | None = None,
) -> int:
    cutoff = (now or datetime.now(tz=UTC)) - retention
    deleted = run_store.delete_runs_completed_before(cutoff)
    log.info("Deleted %d finished runs older than %s", deleted, cutoff.isoformat())
    return deleted


def cleanup_runs(
    run_store: RunStore,
    *,
    stuck_timeout: timedelta = DEFAULT_STUCK_RUN_TIMEOUT,
    retention: timedelta = DEFAULT_RUN_RETENTION,
    now: datetime | None = None,
) -> CleanupResult:
    """Fail stuck runs, then delete finished runs past retention together with their issues."""

    return CleanupResult(
        failed_runs=fail_stuck_runs(run_store, timeout=stuck_timeout, now=now),
        deleted_runs=prune_old_runs(run_store, retention=retention, now=now),
    )
