"""Collapse managed nodes sharing one registry reference to a single survivor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aedsync.domain.geo import haversine_m
from aedsync.domain.reconciliation.removal import plan_guarded_delete
from aedsync.domain.tags import register_ref

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aedsync.domain.classify import DuplicateRefGroup
    from aedsync.domain.features import MapNode
    from aedsync.domain.reconciliation.context import PlanningContext
    from aedsync.domain.registry import RegistryAsset

DUPLICATE_REASON = "duplicate_ref_resolution"


def rank_duplicates(nodes: Sequence[MapNode], asset: RegistryAsset | None) -> list[MapNode]:
    """Closest to the registry position first, ties and unmatched groups by lowest id."""

    if asset is None:
        return sorted(nodes, key=lambda node: node.id)
    return sorted(
        nodes,
        key=lambda node: (
            haversine_m(node.lat, node.lon, asset.latitude, asset.longitude),
            node.id,
        ),
    )


async def resolve_duplicates(
    context: PlanningContext,
    groups: Sequence[DuplicateRefGroup],
) -> list[MapNode]:
    """Plan deletes for all but one node per duplicate group.

    Returns the managed nodes with each duplicate group reduced to its survivor.
    """

    duplicate_refs = {group.ref for group in groups}
    survivors: list[MapNode] = [
        node
        for node in context.snapshot.managed_nodes
        if register_ref(node.tags) not in duplicate_refs
    ]
    deleted: list[int] = []
    for group in groups:
        ranked = rank_duplicates(group.nodes, context.registry.get(group.ref))
        if not ranked:
            continue
        keep, *extras = ranked
        survivors.append(keep)
        for node in extras:
            planned = await plan_guarded_delete(
                context, node, group.ref, label="duplicate delete", reason=DUPLICATE_REASON
            )
            if planned:
                deleted.append(node.id)
    context.working.remove_nodes(deleted)
    return survivors
