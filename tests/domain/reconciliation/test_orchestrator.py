from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from aedsync.domain.classify import EmptySnapshotError
from aedsync.domain.issues import IssueType
from aedsync.domain.reconciliation import (
    MassDeletionError,
    ReconcileResult,
    ReconcileSettings,
    run_reconciliation,
)
from aedsync.domain.runs import RunMode, RunStatus
from tests.helpers.aeds import (
    OSLO_LAT,
    FakeMapEditor,
    InMemoryRunStore,
    RecordingPlanWriter,
    StaticMapFetcher,
    StaticRegistryFetcher,
    aed_tags,
    make_node,
    make_record,
    square_boundary,
)

if TYPE_CHECKING:
    from pathlib import Path

    from aedsync.domain.features import MapNode
    from aedsync.domain.registry import RegistryRecord


def _run(
    tmp_path: Path,
    nodes: list[MapNode],
    records: list[RegistryRecord],
    *,
    store: InMemoryRunStore,
    editor: FakeMapEditor | None = None,
    settings: ReconcileSettings | None = None,
    writer: RecordingPlanWriter | None = None,
) -> ReconcileResult:
    active_editor = editor or FakeMapEditor()
    active_editor.remember(nodes)
    return asyncio.run(
        run_reconciliation(
            map_fetcher=StaticMapFetcher([node.to_element() for node in nodes]),
            registry_fetcher=StaticRegistryFetcher(records),
            editor=active_editor,
            run_store=store,
            write_plan=writer or RecordingPlanWriter(tmp_path),
            boundary=square_boundary(),
            settings=settings,
        )
    )


def test_dry_run_plans_and_records_success(tmp_path: Path) -> None:
    store = InMemoryRunStore()
    editor = FakeMapEditor()
    nodes = [make_node(1, tags=aed_tags("A")), make_node(2, OSLO_LAT + 0.5)]
    records = [make_record("A"), make_record("B", lat=OSLO_LAT + 0.2), make_record(None)]

    result = _run(tmp_path, nodes, records, store=store, editor=editor)

    run = store.runs[result.run_id]
    assert run.status is RunStatus.SUCCESS
    assert run.mode is RunMode.DRY_RUN
    assert run.registry_aeds == 2
    assert run.osm_aeds == 2
    assert run.linked_aeds == 1
    assert run.updated == 1
    assert run.created == 1
    assert editor.uploads == []
    assert result.changeset is None
    assert result.output_paths.osc_path == tmp_path / "changes.osc"
    stored_types = {issue.type for issue in store.issues[result.run_id]}
    assert IssueType.REGISTER_MISSING_REQUIRED_DATA in stored_types
    assert IssueType.OSM_NODE_MISSING_REF in stored_types


def test_live_run_uploads_plan_with_comment_subject(tmp_path: Path) -> None:
    store = InMemoryRunStore()
    editor = FakeMapEditor()
    settings = ReconcileSettings(mode=RunMode.LIVE, comment_subject="AED-er")

    result = _run(
        tmp_path,
        [make_node(1, OSLO_LAT + 0.5)],
        [make_record("A")],
        store=store,
        editor=editor,
        settings=settings,
    )

    ((uploaded, subject),) = editor.uploads
    assert uploaded is result.plan
    assert subject == "AED-er"
    assert result.changeset is not None
    assert result.changeset.created == 1
    assert store.runs[result.run_id].mode is RunMode.LIVE


def test_live_run_with_nothing_to_do_skips_upload(tmp_path: Path) -> None:
    editor = FakeMapEditor()
    node = make_node(1, tags=aed_tags("A", emergency__phone="113"))

    result = _run(
        tmp_path,
        [node],
        [make_record("A")],
        store=InMemoryRunStore(),
        editor=editor,
        settings=ReconcileSettings(mode=RunMode.LIVE),
    )

    assert result.plan.is_empty
    assert editor.uploads == []
    assert result.metrics.unchanged == 1


def test_mass_deletion_fails_run_and_keeps_issues(tmp_path: Path) -> None:
    store = InMemoryRunStore()
    editor = FakeMapEditor()
    writer = RecordingPlanWriter(tmp_path)
    nodes = [
        make_node(node_id, OSLO_LAT + node_id / 100, tags=aed_tags(f"R{node_id}"))
        for node_id in range(1, 5)
    ]
    records = [make_record("R1", lat=OSLO_LAT + 0.01), make_record(None)]

    with pytest.raises(MassDeletionError):
        _run(
            tmp_path,
            nodes,
            records,
            store=store,
            editor=editor,
            settings=ReconcileSettings(mode=RunMode.LIVE),
            writer=writer,
        )

    (run,) = store.runs.values()
    assert run.status is RunStatus.FAILED
    assert run.error_message is not None
    assert "Refusing to delete 3 of 4" in run.error_message
    assert run.deleted == 3
    assert editor.uploads == []
    assert writer.plans == []
    assert sorted(tmp_path.glob("*.osc")) + sorted(tmp_path.glob("*.geojson")) == []
    assert [issue.type for issue in store.issues[run.id]] == [
        IssueType.REGISTER_MISSING_REQUIRED_DATA
    ]


def test_empty_map_snapshot_fails_run(tmp_path: Path) -> None:
    store = InMemoryRunStore()

    with pytest.raises(EmptySnapshotError):
        _run(tmp_path, [], [make_record("A")], store=store)

    (run,) = store.runs.values()
    assert run.status is RunStatus.FAILED
    assert run.error_message == "No AED nodes found"
