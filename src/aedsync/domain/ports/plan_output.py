"""Port for persisting a rendered change plan for review."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from aedsync.domain.plan import ChangePlan


@dataclass(slots=True, frozen=True)
class PlanOutputPaths:
    osc_path: Path
    geojson_path: Path


@runtime_checkable
class PlanWriter(Protocol):
    def __call__(self, plan: ChangePlan) -> PlanOutputPaths: ...


__all__ = ["PlanOutputPaths", "PlanWriter"]
