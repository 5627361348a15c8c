"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.adapters.osm import OsmEditor
from aedsync.adapters.overpass import OverpassFetcher
from aedsync.adapters.plan_files import PlanFileWriter
from aedsync.adapters.registry import RegistryAPIFetcher
from aedsync.adapters.sqlalchemy.run_store import SqlAlchemyRunStore
from aedsync.adapters.sqlalchemy.unit_of_work import is_started, startup
from aedsync.config import get_housekeeping_config, get_reconciler_config
from aedsync.domain.geo import load_boundary
from aedsync.domain.housekeeping import CleanupResult
from aedsync.domain.housekeeping import cleanup_runs as cleanup_run_history
from aedsync.domain.reconciliation import (
    PlanningThresholds,
    ReconcileResult,
    ReconcileSettings,
    run_reconciliation,
)
from aedsync.domain.runs import RunMode

if TYPE_CHECKING:
    from datetime import datetime, timedelta
    from pathlib import Path

    from aedsync.config import ReconcilerConfig
    from aedsync.domain.geo import Boundary
    from aedsync.domain.ports import (
        MapEditor,
        MapSnapshotFetcher,
        PlanWriter,
        RegistryFetcher,
        RunStore,
    )


log = getLogger(__name__)


def _default_run_store() -> SqlAlchemyRunStore:
    if not is_started():
        startup()
    return SqlAlchemyRunStore()


def build_settings(config: ReconcilerConfig) -> ReconcileSettings:
    return ReconcileSettings(
        mode=RunMode.DRY_RUN if config.dry_run else RunMode.LIVE,
        max_delete_fraction=config.max_delete_fraction,
        thresholds=PlanningThresholds(
            move_threshold_m=config.changed_location_distance_m,
            nearby_radius_m=config.nearby_aed_distance_m,
            merge_radius_m=config.unmanaged_merge_distance_m,
        ),
        comment_subject=config.comment_subject,
    )


def reconcile(
    *,
    live: bool | None = None,
    osc_path: Path | None = None,
    geojson_path: Path | None = None,
    max_delete_fraction: float | None = None,
    map_fetcher: MapSnapshotFetcher | None = None,
    registry_fetcher: RegistryFetcher | None = None,
    editor: MapEditor | None = None,
    run_store: RunStore | None = None,
    write_plan: PlanWriter | None = None,
    boundary: Boundary | None = None,
) -> ReconcileResult:
    """Run one reconciliation with the configured adapters.

    Keyword arguments override the environment configuration; adapters default to the HTTP
    clients and the SQLAlchemy run store.
    """

    config = get_reconciler_config()
    if live is not None:
        config = replace(config, dry_run=not live)
    if osc_path is not None:
        config = replace(config, osc_output_path=osc_path)
    if geojson_path is not None:
        config = replace(config, geojson_output_path=geojson_path)
    if max_delete_fraction is not None:
        config = replace(config, max_delete_fraction=max_delete_fraction)
    if not 0 <= config.max_delete_fraction <= 1:
        raise ValueError("max_delete_fraction must be between 0 and 1")

    settings = build_settings(config)
    log.info(
        f"Starting reconciliation: mode={settings.mode}, "
        f"max_delete_fraction={settings.max_delete_fraction}"
    )

    result = asyncio.run(
        run_reconciliation(
            map_fetcher=map_fetcher or OverpassFetcher(),
            registry_fetcher=registry_fetcher or RegistryAPIFetcher(),
            editor=editor or OsmEditor(),
            run_store=run_store or _default_run_store(),
            write_plan=write_plan
            or PlanFileWriter(config.osc_output_path, config.geojson_output_path),
            boundary=boundary if boundary is not None else load_boundary(config.boundary_path),
            settings=settings,
        )
    )

    counts = result.metrics
    log.info(
        f"Finished reconciliation {result.run_id}: created={counts.created}, "
        f"updated={counts.updated}, deleted={counts.deleted}, unchanged={counts.unchanged}, "
        f"issues={len(result.issues)}"
    )
    return result


def cleanup_runs(
    *,
    stuck_timeout: timedelta | None = None,
    retention: timedelta | None = None,
    run_store: RunStore | None = None,
    now: datetime | None = None,
) -> CleanupResult:
    """Fail stuck runs and prune old run history."""

    config = get_housekeeping_config()
    result = cleanup_run_history(
        run_store or _default_run_store(),
        stuck_timeout=stuck_timeout or config.stuck_run_timeout,
        retention=retention or config.run_retention,
        now=now,
    )
    log.info(
        f"Cleanup finished: failed_runs={result.failed_runs}, deleted_runs={result.deleted_runs}"
    )
    return result
