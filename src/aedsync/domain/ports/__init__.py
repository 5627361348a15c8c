"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import MapSnapshotFetcher, RegistryFetcher
from .map_editing import ChangesetResult, MapEditor
from .plan_output import PlanOutputPaths, PlanWriter
from .persistence import Repository, SyncRunIssueRepository, SyncRunRepository
from .run_store import RunStore
from .unit_of_work import (
    RepositoryCollection,
    RunHistoryRepositories,
    RunHistoryUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ChangesetResult",
    "MapEditor",
    "MapSnapshotFetcher",
    "PlanOutputPaths",
    "PlanWriter",
    "RegistryFetcher",
    "Repository",
    "RepositoryCollection",
    "RunHistoryRepositories",
    "RunHistoryUnitOfWork",
    "RunStore",
    "SyncRunIssueRepository",
    "SyncRunRepository",
    "UnitOfWork",
]
