from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import inspect, text

from aedsync.adapters.sqlalchemy import create_all_tables, start_mappers
from aedsync.domain.issues import IssueType, Severity
from aedsync.domain.runs import RunMode, RunStatus, SyncRun, SyncRunIssue

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_start_mappers_is_idempotent() -> None:
    # First invocation happens in the sqlite_engine fixture; calling again should be harmless.
    start_mappers()
    start_mappers()


def test_migrations_create_run_history_schema(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert {"sync_runs", "sync_run_issues", "alembic_version"} <= set(
        inspector.get_table_names()
    )
    run_indexes = {index["name"] for index in inspector.get_indexes("sync_runs")}
    issue_indexes = {index["name"] for index in inspector.get_indexes("sync_run_issues")}
    assert "ix_sync_runs_status_started_at" in run_indexes
    assert "ix_sync_run_issues_run_id" in issue_indexes
    (foreign_key,) = inspector.get_foreign_keys("sync_run_issues")
    assert foreign_key["referred_table"] == "sync_runs"


def test_create_all_tables_is_safe_after_migrations(sqlite_engine: Engine) -> None:
    create_all_tables(sqlite_engine)

    assert "sync_runs" in inspect(sqlite_engine).get_table_names()


def test_enums_are_stored_by_value(sqlite_session: Session) -> None:
    run = SyncRun(mode=RunMode.DRY_RUN, status=RunStatus.SUCCESS)
    issue = SyncRunIssue(
        run_id=run.id,
        type=IssueType.REGISTER_AED_OUTSIDE_BOUNDARY,
        severity=Severity.WARNING,
        message="outside",
        details={"location": {"lat": 1.0, "lon": 2.0}},
    )
    sqlite_session.add_all([run, issue])
    sqlite_session.commit()

    raw_mode, raw_status = sqlite_session.execute(text("SELECT mode, status FROM sync_runs")).one()
    raw_type = sqlite_session.execute(text("SELECT type FROM sync_run_issues")).scalar_one()

    assert (raw_mode, raw_status) == ("dry-run", "success")
    assert raw_type == "register_aed_outside_boundary"


def test_datetimes_are_normalised_to_utc(sqlite_session: Session) -> None:
    oslo = timezone(timedelta(hours=2))
    run = SyncRun(id=uuid4(), mode=RunMode.LIVE, started_at=datetime(2024, 6, 1, 14, tzinfo=oslo))
    sqlite_session.add(run)
    sqlite_session.commit()
    sqlite_session.expire_all()

    loaded = sqlite_session.get(SyncRun, run.id)

    assert loaded is not None
    assert loaded.started_at == datetime(2024, 6, 1, 12, tzinfo=UTC)
    assert loaded.started_at.tzinfo is not None
