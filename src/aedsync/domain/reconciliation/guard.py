"""Circuit breaker against plans that would delete a large share of managed nodes."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aedsync.domain.plan import ChangePlan

log = getLogger(__name__)


class MassDeletionError(RuntimeError):
    """Raised when planned deletes exceed the configured fraction of managed nodes."""

    def __init__(
        self,
        message: str,
        *,
        planned_deletes: int,
        managed_nodes: int,
        max_fraction: float,
    ) -> None:
        super().__init__(message)
        self.planned_deletes = planned_deletes
        self.managed_nodes = managed_nodes
        self.max_fraction = max_fraction


def deletion_fraction(plan: ChangePlan, managed_nodes: int) -> float:
    if managed_nodes <= 0:
        return 0.0 if not plan.delete else 1.0
    return len(plan.delete) / managed_nodes


def check_mass_deletion(plan: ChangePlan, *, managed_nodes: int, max_fraction: float) -> None:
    """Raise :class:`MassDeletionError` when the delete share exceeds ``max_fraction``."""

    fraction = deletion_fraction(plan, managed_nodes)
    if fraction <= max_fraction:
        log.debug(
            "Deletion guard passed: %d of %d managed nodes (%.1f%%)",
            len(plan.delete),
            managed_nodes,
            fraction * 100,
        )
        return
    message = (
        f"Refusing to delete {len(plan.delete)} of {managed_nodes} managed nodes "
        f"({fraction:.1%}); the limit is {max_fraction:.1%}."
    )
    log.error(message)
    raise MassDeletionError(
        message,
        planned_deletes=len(plan.delete),
        managed_nodes=managed_nodes,
        max_fraction=max_fraction,
    )
