"""Ports for persisting run history."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from aedsync.domain.runs import SyncRun, SyncRunIssue

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from aedsync.domain.runs import RunStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class SyncRunRepository(Repository[SyncRun], Protocol):
    def get(self, run_id: UUID) -> SyncRun | None: ...

    def list_by_status(self, status: RunStatus) -> list[SyncRun]: ...

    def delete_finished_before(self, cutoff: datetime) -> int: ...


@runtime_checkable
class SyncRunIssueRepository(Repository[SyncRunIssue], Protocol):
    def list_for_run(self, run_id: UUID) -> list[SyncRunIssue]: ...

    def delete_all(self) -> int: ...

    def delete_for_runs_finished_before(self, cutoff: datetime) -> int: ...
