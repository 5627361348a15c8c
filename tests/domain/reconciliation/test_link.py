from __future__ import annotations

from aedsync.domain.issues import IssueType
from aedsync.domain.reconciliation.link import collect_candidates, plan_links
from tests.helpers.aeds import (
    LAT_STEP_11M,
    OSLO_LAT,
    aed_tags,
    make_asset,
    make_context,
    make_node,
)


def test_nearby_unmanaged_node_gets_registry_tags() -> None:
    node = make_node(5, OSLO_LAT + 0.7 * LAT_STEP_11M, tags=aed_tags(indoor="yes"))
    context = make_context([node], [make_asset("B", site_name="Rådhuset")])

    linked = plan_links(context, context.snapshot.unmanaged_nodes)

    assert linked == {5}
    (change,) = context.plan.modify
    assert change.after.tags["ref:hjertestarterregister"] == "B"
    assert change.after.tags["indoor"] == "yes"
    assert change.after.tags["name"] == "Rådhuset"
    assert change.after.lat == node.lat
    assert context.matched_refs == {"B"}
    assert context.summary.updated == 1


def test_closest_pair_wins_and_loser_is_reported() -> None:
    closer = make_node(5, OSLO_LAT + 0.3 * LAT_STEP_11M)
    farther = make_node(6, OSLO_LAT + 0.9 * LAT_STEP_11M)
    context = make_context([farther, closer], [make_asset("B")])

    linked = plan_links(context, context.snapshot.unmanaged_nodes)

    assert linked == {5}
    (missing,) = context.issues.of_type(IssueType.OSM_NODE_MISSING_REF)
    assert missing.osm_node_id == 6


def test_candidates_are_sorted_by_distance() -> None:
    nodes = [make_node(5, OSLO_LAT + 0.9 * LAT_STEP_11M), make_node(6, OSLO_LAT)]
    context = make_context(nodes, [make_asset("B")])

    candidates = collect_candidates(context, context.snapshot.unmanaged_nodes)

    assert [candidate.node.id for candidate in candidates] == [6, 5]


def test_nodes_beyond_merge_radius_are_not_linked() -> None:
    node = make_node(5, OSLO_LAT + 2 * LAT_STEP_11M)
    context = make_context([node], [make_asset("B")])

    assert plan_links(context, context.snapshot.unmanaged_nodes) == set()
    assert len(context.issues.of_type(IssueType.OSM_NODE_MISSING_REF)) == 1


def test_opted_out_and_matched_refs_are_not_linked() -> None:
    opted_out = make_node(1, OSLO_LAT + 5 * LAT_STEP_11M, tags=aed_tags("B", note="manuell"))
    unmanaged = make_node(5)
    context = make_context([opted_out, unmanaged], [make_asset("A"), make_asset("B")])
    context.matched_refs.add("A")

    assert plan_links(context, context.snapshot.unmanaged_nodes) == set()
    assert len(context.plan) == 0


def test_mixed_unmanaged_node_is_split() -> None:
    node = make_node(5, tags=aed_tags(amenity="townhall"))
    context = make_context([node], [make_asset("B")])

    plan_links(context, context.snapshot.unmanaged_nodes)

    (strip,) = context.plan.modify
    assert strip.after.tags == {"amenity": "townhall"}
    (created,) = context.plan.create
    assert created.register_ref == "B"
    assert context.matched_refs == {"B"}
