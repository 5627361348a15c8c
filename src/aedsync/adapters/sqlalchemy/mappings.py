"""SQLAlchemy mapping metadata for run history."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, cast

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers
from sqlalchemy.orm.exc import UnmappedClassError

from aedsync.domain.issues import IssueType, Severity
from aedsync.domain.runs import RunMode, RunStatus, SyncRun, SyncRunIssue

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class JSONObjectType(TypeDecorator[dict[str, object]]):
    """Issue details stored as a JSON object in a text column."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: dict[str, object] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(value, sort_keys=True, default=str)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, object]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        return cast(dict[str, object], loaded)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


def _value_enum(enum_cls: type[StrEnum]) -> Enum:
    return Enum(enum_cls, native_enum=False, values_callable=_enum_values, length=64)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

sync_run_table = Table(
    "sync_runs",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("mode", _value_enum(RunMode), nullable=False),
    Column("status", _value_enum(RunStatus), nullable=False),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("finished_at", UTCDateTime(), nullable=True),
    Column("error_message", Text, nullable=True),
    Column("registry_aeds", Integer, nullable=False, default=0),
    Column("osm_aeds", Integer, nullable=False, default=0),
    Column("linked_aeds", Integer, nullable=False, default=0),
    Column("created", Integer, nullable=False, default=0),
    Column("updated", Integer, nullable=False, default=0),
    Column("deleted", Integer, nullable=False, default=0),
    Column("unchanged", Integer, nullable=False, default=0),
    Column("skipped_create_nearby", Integer, nullable=False, default=0),
    Column("skipped_delete_not_aed_only", Integer, nullable=False, default=0),
    Index("ix_sync_runs_status_started_at", "status", "started_at"),
)

sync_run_issue_table = Table(
    "sync_run_issues",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "run_id", UUIDColumnType, ForeignKey("sync_runs.id", ondelete="CASCADE"), nullable=False
    ),
    Column("type", _value_enum(IssueType), nullable=False),
    Column("severity", _value_enum(Severity), nullable=False),
    Column("message", Text, nullable=False),
    Column("register_ref", String(64), nullable=True),
    Column("osm_node_id", BigInteger, nullable=True),
    Column("details", JSONObjectType(), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_sync_run_issues_run_id", "run_id"),
)


def _is_mapped(cls: type) -> bool:
    try:
        orm.class_mapper(cls)
    except UnmappedClassError:
        return False
    return True


def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the run-history entities; safe to call repeatedly."""

    if _is_mapped(SyncRun):
        return mapper_registry

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(SyncRun, sync_run_table)
    mapper_registry.map_imperatively(SyncRunIssue, sync_run_issue_table)
    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)


__all__ = [
    "JSONObjectType",
    "UTCDateTime",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
    "sync_run_issue_table",
    "sync_run_table",
]
