from __future__ import annotations

import pytest

from aedsync.domain.plan import ChangePlan, DeleteChange, PlannedNode
from aedsync.domain.reconciliation.guard import (
    MassDeletionError,
    check_mass_deletion,
    deletion_fraction,
)


def _plan_with_deletes(count: int) -> ChangePlan:
    plan = ChangePlan()
    for node_id in range(1, count + 1):
        plan.add_delete(DeleteChange(node=PlannedNode(id=node_id, lat=60.0, lon=10.0)))
    return plan


def test_fraction_at_limit_passes() -> None:
    check_mass_deletion(_plan_with_deletes(1), managed_nodes=10, max_fraction=0.1)


def test_fraction_over_limit_raises_with_context() -> None:
    with pytest.raises(MassDeletionError, match="Refusing to delete 2 of 10") as exc:
        check_mass_deletion(_plan_with_deletes(2), managed_nodes=10, max_fraction=0.1)

    assert exc.value.planned_deletes == 2
    assert exc.value.managed_nodes == 10
    assert exc.value.max_fraction == 0.1


def test_no_managed_nodes() -> None:
    assert deletion_fraction(ChangePlan(), 0) == 0.0
    assert deletion_fraction(_plan_with_deletes(1), 0) == 1.0


def test_zero_limit_blocks_any_delete() -> None:
    check_mass_deletion(ChangePlan(), managed_nodes=5, max_fraction=0.0)
    with pytest.raises(MassDeletionError):
        check_mass_deletion(_plan_with_deletes(1), managed_nodes=5, max_fraction=0.0)
