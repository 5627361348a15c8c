"""Planning phases that turn two snapshots into a change plan.

Flow:
1) resolve duplicate registry references on the map
2) delete managed nodes whose record disappeared
3) update matched managed nodes (splitting mixed features)
4) link unmanaged AED nodes to nearby unmatched records
5) create nodes for the remaining records
"""

from __future__ import annotations

from .context import PlanningContext, PlanningThresholds
from .engine import plan_changes
from .guard import MassDeletionError, check_mass_deletion
from .orchestrator import ReconcileResult, ReconcileSettings, run_reconciliation
from .rendering import build_geojson, render_geojson, render_osc

__all__ = [
    "MassDeletionError",
    "PlanningContext",
    "PlanningThresholds",
    "ReconcileResult",
    "ReconcileSettings",
    "build_geojson",
    "check_mass_deletion",
    "plan_changes",
    "render_geojson",
    "render_osc",
    "run_reconciliation",
]
