"""Change plan types shared by the planning phases, the guard and the executors.

The plan is the contract between:
- the planning phases (duplicates, removal, update, link, creation)
- the mass-deletion guard
- the dry-run renderers and the live changeset upload

Entries are appended in phase order and never reordered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aedsync.domain.features import MapNode
    from aedsync.domain.tags import TagMap, TagUpdates


class Operation(StrEnum):
    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"


@dataclass(slots=True, frozen=True, kw_only=True)
class PlannedNode:
    """Node state as it is written to the map; new nodes carry negative ids."""

    id: int
    lat: float
    lon: float
    version: int | None = None
    tags: TagMap = field(default_factory=dict)

    @classmethod
    def from_node(cls, node: MapNode) -> PlannedNode:
        return cls(id=node.id, lat=node.lat, lon=node.lon, version=node.version, tags=dict(node.tags))


@dataclass(slots=True, frozen=True, kw_only=True)
class CreateChange:
    node: PlannedNode
    register_ref: str | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class ModifyChange:
    """``tag_updates`` maps keys to new values; ``None`` removes the key."""

    before: PlannedNode
    after: PlannedNode
    tag_updates: TagUpdates = field(default_factory=dict)
    register_ref: str | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class DeleteChange:
    node: PlannedNode
    register_ref: str | None = None


@dataclass(slots=True)
class ChangePlan:
    """Aggregate plan for one reconciliation run."""

    create: list[CreateChange] = field(default_factory=list["CreateChange"])
    modify: list[ModifyChange] = field(default_factory=list["ModifyChange"])
    delete: list[DeleteChange] = field(default_factory=list["DeleteChange"])

    def __len__(self) -> int:
        return len(self.create) + len(self.modify) + len(self.delete)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def add_create(self, change: CreateChange) -> None:
        self.create.append(change)

    def add_modify(self, change: ModifyChange) -> None:
        self.modify.append(change)

    def add_delete(self, change: DeleteChange) -> None:
        self.delete.append(change)

    def counts(self) -> dict[Operation, int]:
        return {
            Operation.CREATE: len(self.create),
            Operation.MODIFY: len(self.modify),
            Operation.DELETE: len(self.delete),
        }
