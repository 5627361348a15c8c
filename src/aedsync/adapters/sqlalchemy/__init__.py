"""SQLAlchemy adapter package for aedsync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemySyncRunIssueRepository, SqlAlchemySyncRunRepository

__all__ = [
    "SqlAlchemySyncRunIssueRepository",
    "SqlAlchemySyncRunRepository",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
]
