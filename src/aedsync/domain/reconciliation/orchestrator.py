"""Run one reconciliation end to end and report it to the run store."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.classify import classify_elements
from aedsync.domain.issues import IssueLog
from aedsync.domain.reconciliation.context import PlanningContext, PlanningThresholds
from aedsync.domain.reconciliation.engine import plan_changes
from aedsync.domain.reconciliation.guard import check_mass_deletion
from aedsync.domain.registry_loader import load_registry
from aedsync.domain.runs import RunMode, RunStatus
from aedsync.domain.summary import RunMetrics
from aedsync.domain.tag_synthesis import TagSynthesizer
from aedsync.domain.working_set import WorkingFeatures

if TYPE_CHECKING:
    from uuid import UUID

    from aedsync.domain.geo import Boundary
    from aedsync.domain.issues import Issue
    from aedsync.domain.plan import ChangePlan
    from aedsync.domain.ports import (
        ChangesetResult,
        MapEditor,
        MapSnapshotFetcher,
        PlanOutputPaths,
        PlanWriter,
        RegistryFetcher,
        RunStore,
    )
    from aedsync.domain.summary import ReconciliationSummary

log = getLogger(__name__)


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconcileSettings:
    mode: RunMode = RunMode.DRY_RUN
    max_delete_fraction: float = 0.1
    thresholds: PlanningThresholds = field(default_factory=PlanningThresholds)
    comment_subject: str = "AED locations from Hjertestarterregisteret"


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of a successful run."""

    run_id: UUID
    plan: ChangePlan
    summary: ReconciliationSummary
    metrics: RunMetrics
    issues: tuple[Issue, ...]
    output_paths: PlanOutputPaths
    changeset: ChangesetResult | None = None


def _error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__


async def run_reconciliation(
    *,
    map_fetcher: MapSnapshotFetcher,
    registry_fetcher: RegistryFetcher,
    editor: MapEditor,
    run_store: RunStore,
    write_plan: PlanWriter,
    boundary: Boundary,
    settings: ReconcileSettings | None = None,
) -> ReconcileResult:
    """Fetch both snapshots, plan, guard, write review files and upload in live mode.

    Issues and metrics are stored whether the run succeeds or fails; failures are re-raised
    after the run has been marked failed.
    """

    active = settings or ReconcileSettings()
    run_id = run_store.start_run(active.mode)
    log.info("Started %s run %s", active.mode, run_id)

    issues = IssueLog()
    metrics = RunMetrics()
    issues_persisted = False
    try:
        snapshot = classify_elements(await map_fetcher(), issues=issues)
        metrics.osm_aeds = snapshot.aed_node_count

        registry = load_registry(await registry_fetcher(), boundary=boundary, issues=issues)
        metrics.registry_aeds = len(registry)

        context = PlanningContext(
            mode=active.mode,
            snapshot=snapshot,
            registry=registry,
            working=WorkingFeatures(snapshot.elements),
            editor=editor,
            issues=issues,
            synthesize=TagSynthesizer(issues),
            thresholds=active.thresholds,
        )
        plan = await plan_changes(context)
        metrics.absorb(context.summary)
        metrics.linked_aeds = len(context.matched_refs)

        check_mass_deletion(
            plan,
            managed_nodes=len(snapshot.managed_nodes),
            max_fraction=active.max_delete_fraction,
        )

        output_paths = write_plan(plan)
        log.info(
            "Wrote planned changes to %s and %s", output_paths.osc_path, output_paths.geojson_path
        )

        changeset: ChangesetResult | None = None
        if active.mode is RunMode.LIVE:
            if plan.is_empty:
                log.info("No changes to upload")
            else:
                changeset = await editor.apply_changes(plan, comment_subject=active.comment_subject)
                log.info("Uploaded changeset %s", changeset.changeset_id)

        run_store.replace_run_issues(run_id, issues.snapshot())
        issues_persisted = True
        run_store.complete_run(run_id, RunStatus.SUCCESS, metrics=metrics)
    except Exception as exc:
        if not issues_persisted:
            try:
                run_store.replace_run_issues(run_id, issues.snapshot())
            except Exception:
                log.exception("Failed to persist issues for run %s", run_id)
        try:
            run_store.complete_run(
                run_id, RunStatus.FAILED, metrics=metrics, error_message=_error_message(exc)
            )
        except Exception:
            log.exception("Failed to mark run %s as failed", run_id)
        raise

    log.info("Stored run %s with %d issues", run_id, len(issues))
    return ReconcileResult(
        run_id=run_id,
        plan=plan,
        summary=context.summary,
        metrics=metrics,
        issues=issues.snapshot(),
        output_paths=output_paths,
        changeset=changeset,
    )
