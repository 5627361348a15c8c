"""Separate an AED from a node that also represents another feature."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.features import MapNode
from aedsync.domain.issues import IssueType
from aedsync.domain.plan import CreateChange, ModifyChange, PlannedNode
from aedsync.domain.tags import apply_updates, conflict_keys, strip_updates

if TYPE_CHECKING:
    from aedsync.domain.reconciliation.context import PlanningContext
    from aedsync.domain.registry import RegistryAsset
    from aedsync.domain.tags import TagMap

log = getLogger(__name__)


def split_mixed_node(
    context: PlanningContext,
    node: MapNode,
    asset: RegistryAsset,
    *,
    current_tags: TagMap | None = None,
) -> PlannedNode:
    """Strip AED tags from ``node`` and plan a dedicated AED node at the registry position.

    ``current_tags`` overrides the snapshot tags when a fresher copy was fetched. Returns the
    planned AED node.
    """

    tags = dict(node.tags if current_tags is None else current_tags)
    updates = strip_updates(tags)
    source = PlannedNode(id=node.id, lat=node.lat, lon=node.lon, version=node.version, tags=tags)
    context.plan.add_modify(
        ModifyChange(
            before=source,
            after=PlannedNode(
                id=node.id,
                lat=node.lat,
                lon=node.lon,
                version=node.version,
                tags=apply_updates(tags, updates),
            ),
            tag_updates=updates,
            register_ref=asset.guid,
        )
    )

    created = PlannedNode(
        id=context.summary.next_placeholder_id,
        lat=asset.latitude,
        lon=asset.longitude,
        version=0,
        tags=context.synthesize(asset),
    )
    context.plan.add_create(CreateChange(node=created, register_ref=asset.guid))

    context.issues.warning(
        IssueType.AED_SPLIT_NON_STANDALONE_NODE,
        f"Split AED from non-standalone node {node.id} ({asset.guid}); created dedicated AED node.",
        register_ref=asset.guid,
        osm_node_id=node.id,
        details={"conflictTagKeys": conflict_keys(tags)},
    )

    context.working.replace_node(
        node.id,
        MapNode(id=created.id, lat=created.lat, lon=created.lon, tags=dict(created.tags)),
    )
    context.summary.updated += 1
    context.summary.created += 1
    log.debug("Planned split of node %s for register AED %s", node.id, asset.guid)
    return created
