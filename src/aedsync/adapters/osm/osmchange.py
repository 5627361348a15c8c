"""XML documents posted to the OSM changeset endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from aedsync.domain.features import MapNode


def english_list(words: list[str]) -> str:
    """Join ``words`` the way an English sentence does, with a serial comma."""

    if len(words) <= 1:
        return "".join(words)
    if len(words) == 2:
        return f"{words[0]} and {words[1]}"
    return f"{', '.join(words[:-1])}, and {words[-1]}"


def build_changeset_comment(*, created: int, modified: int, deleted: int, subject: str) -> str:
    labels = [
        label
        for label, count in (("Added", created), ("Modified", modified), ("Deleted", deleted))
        if count > 0
    ]
    action = english_list(labels) if labels else "Updated"
    return f"{action} {subject}"


def _to_bytes(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def changeset_document(tags: Mapping[str, str]) -> bytes:
    root = ET.Element("osm")
    changeset = ET.SubElement(root, "changeset")
    for key, value in tags.items():
        ET.SubElement(changeset, "tag", k=key, v=value)
    return _to_bytes(root)


def _append_node(parent: ET.Element, node: MapNode, *, changeset_id: int, version: int) -> None:
    element = ET.SubElement(
        parent,
        "node",
        id=str(node.id),
        changeset=str(changeset_id),
        version=str(version),
        lat=str(node.lat),
        lon=str(node.lon),
    )
    for key, value in sorted(node.tags.items()):
        ET.SubElement(element, "tag", k=key, v=value)


def osmchange_document(
    *,
    changeset_id: int,
    create: Iterable[MapNode],
    modify: Iterable[MapNode],
    delete: Iterable[MapNode],
) -> bytes:
    """Upload body; modified and deleted nodes must carry their live versions."""

    root = ET.Element("osmChange", version="0.6", generator="aedsync")
    create_section = ET.SubElement(root, "create")
    for node in create:
        _append_node(create_section, node, changeset_id=changeset_id, version=0)
    modify_section = ET.SubElement(root, "modify")
    for node in modify:
        _append_node(modify_section, node, changeset_id=changeset_id, version=node.version or 1)
    delete_section = ET.SubElement(root, "delete", {"if-unused": "true"})
    for node in delete:
        _append_node(delete_section, node, changeset_id=changeset_id, version=node.version or 1)
    return _to_bytes(root)
