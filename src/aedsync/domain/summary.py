"""Run counters."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(slots=True)
class ReconciliationSummary:
    """Per-outcome counters incremented by the planning phases."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    skipped_create_nearby: int = 0
    skipped_delete_not_aed_only: int = 0

    @property
    def next_placeholder_id(self) -> int:
        """Negative id for the next node to be created."""

        return -(self.created + 1)


@dataclass(slots=True)
class RunMetrics:
    """Summary counters plus snapshot sizes, persisted with the run."""

    registry_aeds: int = 0
    osm_aeds: int = 0
    linked_aeds: int = 0
    created: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    skipped_create_nearby: int = 0
    skipped_delete_not_aed_only: int = 0

    def absorb(self, summary: ReconciliationSummary) -> None:
        for name, value in asdict(summary).items():
            setattr(self, name, value)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
