"""Create map nodes for registry AEDs with no counterpart."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.features import ElementKind
from aedsync.domain.issues import IssueType
from aedsync.domain.plan import CreateChange, PlannedNode

if TYPE_CHECKING:
    from aedsync.domain.reconciliation.context import PlanningContext
    from aedsync.domain.registry import RegistryAsset
    from aedsync.domain.working_set import NearbyElement

log = getLogger(__name__)


def plan_creates(context: PlanningContext) -> None:
    for asset in context.registry.values():
        if context.is_satisfied(asset.guid):
            continue
        nearby = context.working.find_nearby(
            asset.latitude, asset.longitude, context.thresholds.nearby_radius_m
        )
        if nearby is not None:
            _skip_nearby(context, asset, nearby)
            continue

        node = PlannedNode(
            id=context.summary.next_placeholder_id,
            lat=asset.latitude,
            lon=asset.longitude,
            version=0,
            tags=context.synthesize(asset),
        )
        context.plan.add_create(CreateChange(node=node, register_ref=asset.guid))
        context.summary.created += 1
        log.debug(
            "Planned create for register AED %s at %s,%s",
            asset.guid,
            asset.latitude,
            asset.longitude,
        )


def _skip_nearby(context: PlanningContext, asset: RegistryAsset, nearby: NearbyElement) -> None:
    element = nearby.element
    context.summary.skipped_create_nearby += 1
    context.issues.warning(
        IssueType.SKIPPED_CREATE_NEARBY,
        f"Skipped create for register AED {asset.guid}: nearby {element.kind} {element.id} "
        f"at {nearby.distance_m:.1f}m.",
        register_ref=asset.guid,
        osm_node_id=element.id if element.kind is ElementKind.NODE else None,
        details={
            "nearbyElementType": str(element.kind),
            "nearbyElementId": element.id,
            "distanceMeters": round(nearby.distance_m, 2),
        },
    )
