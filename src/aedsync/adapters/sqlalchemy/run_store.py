"""Run store backed by the SQLAlchemy unit of work."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyRunStoreUnitOfWork
from aedsync.domain.ports.run_store import RunStore
from aedsync.domain.runs import RunStatus, SyncRun, SyncRunIssue

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from aedsync.domain.issues import Issue
    from aedsync.domain.ports.unit_of_work import RunHistoryUnitOfWork
    from aedsync.domain.runs import RunMode
    from aedsync.domain.summary import RunMetrics

log = getLogger(__name__)


class RunNotFoundError(RuntimeError):
    def __init__(self, run_id: UUID) -> None:
        super().__init__(f"Sync run {run_id} does not exist")
        self.run_id = run_id


@dataclass(slots=True)
class SqlAlchemyRunStore:
    uow_factory: Callable[[], RunHistoryUnitOfWork] = field(default=SqlAlchemyRunStoreUnitOfWork)

    def start_run(self, mode: RunMode) -> UUID:
        run = SyncRun(mode=mode)
        with self.uow_factory() as uow:
            uow.repositories.runs.add(run)
            uow.commit()
        log.debug(f"Inserted {mode} run {run.id}")
        return run.id

    def complete_run(
        self,
        run_id: UUID,
        status: RunStatus,
        *,
        metrics: RunMetrics | None = None,
        error_message: str | None = None,
    ) -> None:
        with self.uow_factory() as uow:
            run = uow.repositories.runs.get(run_id)
            if run is None:
                raise RunNotFoundError(run_id)
            run.complete(status, metrics=metrics, error_message=error_message)
            uow.commit()
        log.debug(f"Run {run_id} finished with status {status}")

    def replace_run_issues(self, run_id: UUID, issues: Sequence[Issue]) -> None:
        with self.uow_factory() as uow:
            removed = uow.repositories.issues.delete_all()
            for issue in issues:
                uow.repositories.issues.add(SyncRunIssue.from_issue(run_id, issue))
            uow.commit()
        log.debug(f"Replaced {removed} stored issues with {len(issues)} for run {run_id}")

    def list_running_runs(self) -> list[SyncRun]:
        with self.uow_factory() as uow:
            return uow.repositories.runs.list_by_status(RunStatus.RUNNING)

    def list_issues(self, run_id: UUID) -> list[SyncRunIssue]:
        with self.uow_factory() as uow:
            return uow.repositories.issues.list_for_run(run_id)

    def get_run(self, run_id: UUID) -> SyncRun | None:
        with self.uow_factory() as uow:
            return uow.repositories.runs.get(run_id)

    def delete_runs_completed_before(self, cutoff: datetime) -> int:
        with self.uow_factory() as uow:
            uow.repositories.issues.delete_for_runs_finished_before(cutoff)
            deleted = uow.repositories.runs.delete_finished_before(cutoff)
            uow.commit()
        return deleted


if TYPE_CHECKING:
    _run_store_check: RunStore = SqlAlchemyRunStore()
