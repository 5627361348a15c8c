"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, select

from aedsync.adapters.sqlalchemy.mappings import sync_run_issue_table, sync_run_table
from aedsync.domain.runs import RunStatus, SyncRun, SyncRunIssue

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy import CursorResult, Select
    from sqlalchemy.orm import Session


def _finished_before(cutoff: datetime) -> Select[tuple[UUID]]:
    return (
        select(sync_run_table.c.id)
        .where(sync_run_table.c.status != RunStatus.RUNNING)
        .where(sync_run_table.c.finished_at.is_not(None))
        .where(sync_run_table.c.finished_at < cutoff)
    )


def _rowcount(result: object) -> int:
    return cast("CursorResult[object]", result).rowcount


class SqlAlchemySyncRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: SyncRun) -> None:
        self.session.add(entity)

    def get(self, run_id: UUID) -> SyncRun | None:
        return self.session.get(SyncRun, run_id)

    def list_by_status(self, status: RunStatus) -> list[SyncRun]:
        stmt = (
            select(SyncRun)
            .where(sync_run_table.c.status == status)
            .order_by(sync_run_table.c.started_at)
        )
        return list(self.session.execute(stmt).scalars())

    def delete_finished_before(self, cutoff: datetime) -> int:
        stmt = delete(sync_run_table).where(sync_run_table.c.id.in_(_finished_before(cutoff)))
        return _rowcount(self.session.execute(stmt))


class SqlAlchemySyncRunIssueRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: SyncRunIssue) -> None:
        self.session.add(entity)

    def list_for_run(self, run_id: UUID) -> list[SyncRunIssue]:
        stmt = (
            select(SyncRunIssue)
            .where(sync_run_issue_table.c.run_id == run_id)
            .order_by(sync_run_issue_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def delete_all(self) -> int:
        return _rowcount(self.session.execute(delete(sync_run_issue_table)))

    def delete_for_runs_finished_before(self, cutoff: datetime) -> int:
        stmt = delete(sync_run_issue_table).where(
            sync_run_issue_table.c.run_id.in_(_finished_before(cutoff))
        )
        return _rowcount(self.session.execute(stmt))

