"""Sequence the planning phases over one snapshot pair."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.reconciliation.creation import plan_creates
from aedsync.domain.reconciliation.duplicates import resolve_duplicates
from aedsync.domain.reconciliation.link import plan_links
from aedsync.domain.reconciliation.removal import plan_removals
from aedsync.domain.reconciliation.update import plan_updates

if TYPE_CHECKING:
    from aedsync.domain.plan import ChangePlan
    from aedsync.domain.reconciliation.context import PlanningContext

log = getLogger(__name__)


async def plan_changes(context: PlanningContext) -> ChangePlan:
    """Run duplicate resolution, removal, update, link and creation in that order.

    Each phase reads what the previous ones left in ``context``: removals see the
    de-duplicated managed nodes, links skip refs matched by updates, and creates check
    proximity against the working set as patched by every earlier phase.
    """

    snapshot = context.snapshot
    managed = await resolve_duplicates(context, snapshot.duplicate_ref_groups)
    await plan_removals(context, managed)
    await plan_updates(context, managed)
    plan_links(context, snapshot.unmanaged_nodes)
    plan_creates(context)

    summary = context.summary
    log.info(
        "Planned %d creates, %d modifies, %d deletes "
        "(unchanged=%d, skipped_nearby=%d, skipped_not_aed_only=%d)",
        len(context.plan.create),
        len(context.plan.modify),
        len(context.plan.delete),
        summary.unchanged,
        summary.skipped_create_nearby,
        summary.skipped_delete_not_aed_only,
    )
    return context.plan
