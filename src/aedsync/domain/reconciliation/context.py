"""Shared state threaded through the planning phases of one run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aedsync.domain.plan import ChangePlan
from aedsync.domain.runs import RunMode
from aedsync.domain.summary import ReconciliationSummary

if TYPE_CHECKING:
    from aedsync.domain.classify import ManagedOsmSnapshot
    from aedsync.domain.issues import IssueLog
    from aedsync.domain.ports import MapEditor
    from aedsync.domain.registry import RegistryAsset
    from aedsync.domain.tag_synthesis import TagSynthesizer
    from aedsync.domain.working_set import WorkingFeatures


@dataclass(slots=True, frozen=True)
class PlanningThresholds:
    """Distances in metres steering the update, link and create phases."""

    move_threshold_m: float = 10.0
    nearby_radius_m: float = 20.0
    merge_radius_m: float = 15.0
    location_epsilon_m: float = 0.01


@dataclass(slots=True, kw_only=True)
class PlanningContext:
    """Mutable context shared across planning phases.

    ``snapshot`` and ``registry`` are read-only inputs. ``working``, ``plan``, ``summary``
    and ``matched_refs`` accumulate as the phases run in order.
    """

    mode: RunMode = RunMode.DRY_RUN
    snapshot: ManagedOsmSnapshot
    registry: dict[str, RegistryAsset]
    working: WorkingFeatures
    editor: MapEditor
    issues: IssueLog
    synthesize: TagSynthesizer
    thresholds: PlanningThresholds = field(default_factory=PlanningThresholds)
    plan: ChangePlan = field(default_factory=ChangePlan)
    summary: ReconciliationSummary = field(default_factory=ReconciliationSummary)
    matched_refs: set[str] = field(default_factory=set[str])

    @property
    def is_live(self) -> bool:
        return self.mode is RunMode.LIVE

    def is_satisfied(self, ref: str) -> bool:
        """Whether ``ref`` already has a map counterpart or is opted out."""

        return ref in self.matched_refs or ref in self.snapshot.opted_out_refs
