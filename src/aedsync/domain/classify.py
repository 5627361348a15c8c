"""Partition a map snapshot into managed, unmanaged and opted-out AED nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.issues import IssueType
from aedsync.domain.tags import REGISTER_REF_KEY, is_opted_out, register_ref

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aedsync.domain.features import MapElement, MapNode
    from aedsync.domain.issues import IssueLog

log = getLogger(__name__)


class EmptySnapshotError(RuntimeError):
    """Raised when the map query returns no AED nodes at all."""

    def __init__(self, message: str, *, element_count: int = 0) -> None:
        super().__init__(message)
        self.element_count = element_count


@dataclass(slots=True, frozen=True)
class DuplicateRefGroup:
    ref: str
    nodes: tuple[MapNode, ...]

    @property
    def node_ids(self) -> list[int]:
        return [node.id for node in self.nodes]


@dataclass(slots=True, frozen=True, kw_only=True)
class ManagedOsmSnapshot:
    """Immutable classification of one map snapshot."""

    elements: tuple[MapElement, ...]
    managed_nodes: tuple[MapNode, ...] = ()
    unmanaged_nodes: tuple[MapNode, ...] = ()
    opted_out_refs: frozenset[str] = field(default_factory=frozenset)
    duplicate_ref_groups: tuple[DuplicateRefGroup, ...] = ()
    aed_node_count: int = 0

    @property
    def duplicated_node_ids(self) -> frozenset[int]:
        return frozenset(node.id for group in self.duplicate_ref_groups for node in group.nodes)


def classify_elements(elements: Sequence[MapElement], *, issues: IssueLog) -> ManagedOsmSnapshot:
    """Classify ``elements`` and record opt-out, duplicate and non-node issues.

    Raises :class:`EmptySnapshotError` when no element is a node with finite coordinates.
    """

    nodes: list[MapNode] = []
    for element in elements:
        if element.is_point:
            nodes.append(element.as_node())
            continue
        issues.warning(
            IssueType.OSM_NOT_A_NODE,
            f"Element {element.kind} {element.id} is not a point node; excluded from diffing.",
            details={"elementType": str(element.kind), "elementId": element.id},
        )

    log.info("Found %d AED elements, %d AED nodes", len(elements), len(nodes))
    if not nodes:
        raise EmptySnapshotError("No AED nodes found", element_count=len(elements))

    managed: list[MapNode] = []
    unmanaged: list[MapNode] = []
    opted_out: set[str] = set()
    for node in nodes:
        ref = register_ref(node.tags)
        if is_opted_out(node.tags):
            if ref is not None:
                opted_out.add(ref)
            issues.warning(
                IssueType.OSM_NODE_NOTE_OPT_OUT,
                f"Node {node.id} has note tag and is opted out from automation.",
                register_ref=ref,
                osm_node_id=node.id,
                details={"tags": dict(node.tags)},
            )
            continue
        if ref is not None:
            managed.append(node)
        else:
            unmanaged.append(node)

    groups = _duplicate_groups(managed)
    for group in groups:
        issues.error(
            IssueType.OSM_DUPLICATE_REGISTER_REF,
            f"Duplicate {REGISTER_REF_KEY}={group.ref} found on nodes "
            f"{', '.join(str(node_id) for node_id in group.node_ids)}.",
            register_ref=group.ref,
            details={"nodeIds": group.node_ids},
        )

    log.info(
        "Classified %d managed, %d unmanaged, %d opted-out nodes; %d duplicate refs",
        len(managed),
        len(unmanaged),
        len(opted_out),
        len(groups),
    )
    return ManagedOsmSnapshot(
        elements=tuple(elements),
        managed_nodes=tuple(managed),
        unmanaged_nodes=tuple(unmanaged),
        opted_out_refs=frozenset(opted_out),
        duplicate_ref_groups=tuple(groups),
        aed_node_count=len(nodes),
    )


def _duplicate_groups(managed: Sequence[MapNode]) -> list[DuplicateRefGroup]:
    by_ref: dict[str, list[MapNode]] = {}
    for node in managed:
        ref = register_ref(node.tags)
        if ref is not None:
            by_ref.setdefault(ref, []).append(node)
    return [
        DuplicateRefGroup(ref=ref, nodes=tuple(nodes))
        for ref, nodes in by_ref.items()
        if len(nodes) > 1
    ]
