"""Bring matched managed nodes in line with their registry record."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.geo import haversine_m
from aedsync.domain.issues import IssueType
from aedsync.domain.plan import ModifyChange, PlannedNode
from aedsync.domain.reconciliation.split import split_mixed_node
from aedsync.domain.tags import apply_updates, diff_tags, has_conflict, register_ref

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aedsync.domain.features import MapNode
    from aedsync.domain.reconciliation.context import PlanningContext
    from aedsync.domain.registry import RegistryAsset

log = getLogger(__name__)


async def plan_updates(context: PlanningContext, managed: Sequence[MapNode]) -> None:
    for node in managed:
        ref = register_ref(node.tags)
        if ref is None:
            continue
        asset = context.registry.get(ref)
        if asset is None:
            continue
        context.matched_refs.add(asset.guid)

        if has_conflict(node.tags):
            current_tags = node.tags
            if context.is_live:
                current_tags = (await context.editor.get_node(node.id)).tags
            if has_conflict(current_tags):
                split_mixed_node(context, node, asset, current_tags=current_tags)
                continue

        _plan_node_update(context, node, asset)


def _plan_node_update(context: PlanningContext, node: MapNode, asset: RegistryAsset) -> None:
    thresholds = context.thresholds
    updates = diff_tags(node.tags, context.synthesize(asset))
    distance = haversine_m(node.lat, node.lon, asset.latitude, asset.longitude)
    should_move = distance > thresholds.move_threshold_m

    if distance > thresholds.location_epsilon_m and not should_move:
        context.issues.warning(
            IssueType.MANAGED_NODE_LOCATION_WITHIN_TOLERANCE,
            f"Node {node.id} ({asset.guid}) is {distance:.1f}m from register location; "
            "keeping OSM location.",
            register_ref=asset.guid,
            osm_node_id=node.id,
            details={
                "distanceMeters": round(distance, 2),
                "maxNoMoveDistanceMeters": thresholds.move_threshold_m,
                "osmLocation": {"lat": node.lat, "lon": node.lon},
                "registerLocation": {"lat": asset.latitude, "lon": asset.longitude},
            },
        )

    if not updates and not should_move:
        context.summary.unchanged += 1
        return

    lat, lon = (asset.latitude, asset.longitude) if should_move else (node.lat, node.lon)
    moved = node.moved(lat, lon, apply_updates(node.tags, updates))
    context.plan.add_modify(
        ModifyChange(
            before=PlannedNode.from_node(node),
            after=PlannedNode.from_node(moved),
            tag_updates=dict(updates),
            register_ref=asset.guid,
        )
    )
    context.working.replace_node(node.id, moved)
    context.summary.updated += 1
    log.debug("Planned update of node %s for register AED %s", node.id, asset.guid)
