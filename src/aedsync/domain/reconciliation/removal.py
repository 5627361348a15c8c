"""Delete managed nodes whose registry record no longer exists."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.issues import IssueType
from aedsync.domain.plan import DeleteChange, PlannedNode
from aedsync.domain.tags import is_aed_only, register_ref

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aedsync.domain.features import MapNode
    from aedsync.domain.reconciliation.context import PlanningContext

log = getLogger(__name__)


async def plan_guarded_delete(
    context: PlanningContext,
    node: MapNode,
    ref: str,
    *,
    label: str = "delete",
    reason: str | None = None,
) -> bool:
    """Queue a delete of the live copy of ``node`` unless it has gained non-AED tags.

    Returns whether the delete was planned.
    """

    live = await context.editor.get_node(node.id)
    if not is_aed_only(live.tags):
        details: dict[str, object] = {"tags": dict(live.tags)}
        if reason is not None:
            details["reason"] = reason
        context.summary.skipped_delete_not_aed_only += 1
        context.issues.warning(
            IssueType.SKIPPED_DELETE_NOT_AED_ONLY,
            f"Skipped {label} of node {node.id} ({ref}): node has non-AED tags.",
            register_ref=ref,
            osm_node_id=node.id,
            details=details,
        )
        log.warning("Skipping %s of node %s (%s): node has non-AED tags", label, node.id, ref)
        return False

    context.plan.add_delete(DeleteChange(node=PlannedNode.from_node(live), register_ref=ref))
    context.summary.deleted += 1
    log.debug("Planned %s of node %s (%s)", label, node.id, ref)
    return True


async def plan_removals(context: PlanningContext, managed: Sequence[MapNode]) -> None:
    deleted: list[int] = []
    for node in managed:
        ref = register_ref(node.tags)
        if ref is None or ref in context.registry:
            continue
        if await plan_guarded_delete(context, node, ref):
            deleted.append(node.id)
    context.working.remove_nodes(deleted)
