"""Port through which the orchestrator and housekeeping report run outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from aedsync.domain.issues import Issue
    from aedsync.domain.runs import RunMode, RunStatus, SyncRun
    from aedsync.domain.summary import RunMetrics


@runtime_checkable
class RunStore(Protocol):
    def start_run(self, mode: RunMode) -> UUID: ...

    def complete_run(
        self,
        run_id: UUID,
        status: RunStatus,
        *,
        metrics: RunMetrics | None = None,
        error_message: str | None = None,
    ) -> None: ...

    def replace_run_issues(self, run_id: UUID, issues: Sequence[Issue]) -> None:
        """Delete every stored issue, then insert ``issues`` for ``run_id``; one transaction."""
        ...

    def list_running_runs(self) -> list[SyncRun]: ...

    def delete_runs_completed_before(self, cutoff: datetime) -> int: ...


__all__ = ["RunStore"]
