"""Run-history entities persisted by the run store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from aedsync.domain.issues import IssueType, Severity

if TYPE_CHECKING:
    from aedsync.domain.issues import Issue
    from aedsync.domain.summary import RunMetrics


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class RunMode(StrEnum):
    DRY_RUN = "dry-run"
    LIVE = "live"


class RunStatus(StrEnum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(eq=False, kw_only=True)
class SyncRun:
    """One reconciliation invocation and its outcome counters."""

    id: UUID = field(default_factory=new_id)
    mode: RunMode
    status: RunStatus = RunStatus.RUNNING
    started_at: datetime = field(default_factory=utcnow)
    finished_at: datetime | None = None
    error_message: str | None = None

    registry_aeds: int = 0
    osm_aeds: int = 0
    linked_aeds: int = 0
    created: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    skipped_create_nearby: int = 0
    skipped_delete_not_aed_only: int = 0

    def complete(
        self,
        status: RunStatus,
        *,
        metrics: RunMetrics | None = None,
        error_message: str | None = None,
        finished_at: datetime | None = None,
    ) -> None:
        self.status = status
        self.error_message = error_message
        self.finished_at = finished_at or utcnow()
        if metrics is not None:
            for name, value in metrics.as_dict().items():
                setattr(self, name, value)


@dataclass(eq=False, kw_only=True)
class SyncRunIssue:
    id: UUID = field(default_factory=new_id)
    run_id: UUID
    type: IssueType
    severity: Severity
    message: str
    register_ref: str | None = None
    osm_node_id: int | None = None
    details: dict[str, object] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_issue(cls, run_id: UUID, issue: Issue) -> SyncRunIssue:
        return cls(
            run_id=run_id,
            type=issue.type,
            severity=issue.severity,
            message=issue.message,
            register_ref=issue.register_ref,
            osm_node_id=issue.osm_node_id,
            details=dict(issue.details),
        )
