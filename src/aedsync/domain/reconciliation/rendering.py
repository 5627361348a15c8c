"""Render a change plan as an osmChange document and a GeoJSON review layer."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Final
from xml.sax.saxutils import escape

from aedsync.domain.plan import Operation

if TYPE_CHECKING:
    from aedsync.domain.plan import ChangePlan, PlannedNode

OSC_GENERATOR: Final = "aedsync planned-changes"
_ATTRIBUTE_ENTITIES: Final = {'"': "&quot;", "'": "&apos;"}


def xml_escape(value: str) -> str:
    return escape(value, _ATTRIBUTE_ENTITIES)


def _render_node(node: PlannedNode, fallback_version: int) -> list[str]:
    version = node.version if node.version is not None else fallback_version
    lines = [f'    <node id="{node.id}" lat="{node.lat}" lon="{node.lon}" version="{version}">']
    lines.extend(
        f'      <tag k="{xml_escape(key)}" v="{xml_escape(value)}" />'
        for key, value in sorted(node.tags.items())
    )
    lines.append("    </node>")
    return lines


def render_osc(plan: ChangePlan) -> str:
    """osmChange 0.6 with create, modify and delete sections in plan order."""

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<osmChange version="0.6" generator="{OSC_GENERATOR}">',
        "  <create>",
    ]
    for change in plan.create:
        lines.extend(_render_node(change.node, 0))
    lines.extend(["  </create>", "  <modify>"])
    for change in plan.modify:
        before_version = change.before.version if change.before.version is not None else 1
        lines.extend(_render_node(change.after, before_version))
    lines.extend(["  </modify>", '  <delete if-unused="true">'])
    for change in plan.delete:
        lines.extend(_render_node(change.node, 1))
    lines.extend(["  </delete>", "</osmChange>", ""])
    return "\n".join(lines)


def _feature(
    operation: Operation,
    node: PlannedNode,
    register_ref: str | None,
    **extra: float,
) -> dict[str, Any]:
    properties: dict[str, Any] = {"_operation": str(operation)}
    if register_ref is not None:
        properties["_register_id"] = register_ref
    properties["_osm_id"] = node.id
    properties.update(extra)
    properties.update(node.tags)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [node.lon, node.lat]},
        "properties": properties,
    }


def build_geojson(plan: ChangePlan) -> dict[str, Any]:
    features = [
        _feature(Operation.CREATE, change.node, change.register_ref) for change in plan.create
    ]
    features.extend(
        _feature(
            Operation.MODIFY,
            change.after,
            change.register_ref,
            _from_lat=change.before.lat,
            _from_lon=change.before.lon,
        )
        for change in plan.modify
    )
    features.extend(
        _feature(Operation.DELETE, change.node, change.register_ref) for change in plan.delete
    )
    return {"type": "FeatureCollection", "features": features}


def render_geojson(plan: ChangePlan) -> str:
    return json.dumps(build_geojson(plan), indent=2, ensure_ascii=False) + "\n"
