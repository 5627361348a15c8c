"""Port for reading live nodes and submitting change plans to the map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aedsync.domain.features import MapNode
    from aedsync.domain.plan import ChangePlan


@dataclass(slots=True, frozen=True)
class ChangesetResult:
    """Outcome of one uploaded changeset; ``changeset_id`` is ``None`` when nothing was sent."""

    changeset_id: int | None
    created: int = 0
    modified: int = 0
    deleted: int = 0


@runtime_checkable
class MapEditor(Protocol):
    async def get_node(self, node_id: int) -> MapNode: ...

    async def apply_changes(self, plan: ChangePlan, *, comment_subject: str) -> ChangesetResult: ...


__all__ = ["ChangesetResult", "MapEditor"]
