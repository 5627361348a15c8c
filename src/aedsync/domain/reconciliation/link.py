"""Attach registry references to nearby AED nodes that have none."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.geo import haversine_m
from aedsync.domain.issues import IssueType
from aedsync.domain.plan import ModifyChange, PlannedNode
from aedsync.domain.reconciliation.split import split_mixed_node
from aedsync.domain.tags import REGISTER_REF_KEY, has_conflict

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aedsync.domain.features import MapNode
    from aedsync.domain.reconciliation.context import PlanningContext
    from aedsync.domain.registry import RegistryAsset

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LinkCandidate:
    node: MapNode
    asset: RegistryAsset
    distance_m: float


def collect_candidates(context: PlanningContext, nodes: Sequence[MapNode]) -> list[LinkCandidate]:
    """All unmatched (node, asset) pairs within the merge radius, closest first.

    The sort is stable, so equal distances keep node order then registry order.
    """

    radius = context.thresholds.merge_radius_m
    candidates: list[LinkCandidate] = []
    for node in nodes:
        for asset in context.registry.values():
            if context.is_satisfied(asset.guid):
                continue
            distance = haversine_m(node.lat, node.lon, asset.latitude, asset.longitude)
            if distance <= radius:
                candidates.append(LinkCandidate(node=node, asset=asset, distance_m=distance))
    candidates.sort(key=lambda candidate: candidate.distance_m)
    return candidates


def plan_links(context: PlanningContext, nodes: Sequence[MapNode]) -> set[int]:
    """Greedily pair unmanaged nodes with registry assets; returns the linked node ids."""

    linked: set[int] = set()
    for candidate in collect_candidates(context, nodes):
        node, asset = candidate.node, candidate.asset
        if node.id in linked or asset.guid in context.matched_refs:
            continue
        if has_conflict(node.tags):
            split_mixed_node(context, node, asset)
        else:
            _merge(context, node, asset)
        context.matched_refs.add(asset.guid)
        linked.add(node.id)
        log.info(
            "Linked unmanaged node %s to register AED %s (%.1fm)",
            node.id,
            asset.guid,
            candidate.distance_m,
        )

    for node in nodes:
        if node.id in linked:
            continue
        context.issues.warning(
            IssueType.OSM_NODE_MISSING_REF,
            f"Node {node.id} is missing {REGISTER_REF_KEY}.",
            osm_node_id=node.id,
            details={"tags": dict(node.tags)},
        )
    return linked


def _merge(context: PlanningContext, node: MapNode, asset: RegistryAsset) -> None:
    canonical = context.synthesize(asset)
    merged = node.moved(node.lat, node.lon, {**node.tags, **canonical})
    context.plan.add_modify(
        ModifyChange(
            before=PlannedNode.from_node(node),
            after=PlannedNode.from_node(merged),
            tag_updates=dict(canonical),
            register_ref=asset.guid,
        )
    )
    context.working.replace_node(node.id, merged)
    context.summary.updated += 1
