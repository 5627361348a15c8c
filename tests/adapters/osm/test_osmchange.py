from __future__ import annotations

from xml.etree import ElementTree as ET

from aedsync.adapters.osm.osmchange import (
    build_changeset_comment,
    changeset_document,
    english_list,
    osmchange_document,
)
from aedsync.domain.features import MapNode


def test_english_list_uses_serial_comma() -> None:
    assert english_list([]) == ""
    assert english_list(["Added"]) == "Added"
    assert english_list(["Added", "Deleted"]) == "Added and Deleted"
    assert english_list(["Added", "Modified", "Deleted"]) == "Added, Modified, and Deleted"


def test_comment_names_only_non_empty_operations() -> None:
    subject = "AED locations from Hjertestarterregisteret"

    assert build_changeset_comment(created=2, modified=0, deleted=1, subject=subject) == (
        "Added and Deleted AED locations from Hjertestarterregisteret"
    )
    assert build_changeset_comment(created=0, modified=0, deleted=0, subject="AEDs") == (
        "Updated AEDs"
    )


def test_changeset_document_carries_tags() -> None:
    root = ET.fromstring(changeset_document({"comment": "Added AEDs", "bot": "yes"}))

    tags = {tag.get("k"): tag.get("v") for tag in root.iter("tag")}
    assert root.tag == "osm"
    assert tags == {"comment": "Added AEDs", "bot": "yes"}


def test_osmchange_document_stamps_changeset_and_versions() -> None:
    created = MapNode(id=-1, lat=59.9, lon=10.7, tags={"name": "B", "emergency": "defibrillator"})
    modified = MapNode(id=5, lat=60.0, lon=10.0, version=7, tags={"emergency": "defibrillator"})
    deleted = MapNode(id=6, lat=61.0, lon=11.0, version=None)

    root = ET.fromstring(
        osmchange_document(changeset_id=99, create=[created], modify=[modified], delete=[deleted])
    )

    assert [section.tag for section in root] == ["create", "modify", "delete"]
    create_node = root.find("create/node")
    assert create_node is not None
    assert create_node.attrib == {
        "id": "-1",
        "changeset": "99",
        "version": "0",
        "lat": "59.9",
        "lon": "10.7",
    }
    assert [tag.get("k") for tag in create_node.iter("tag")] == ["emergency", "name"]
    modify_node = root.find("modify/node")
    assert modify_node is not None
    assert modify_node.get("version") == "7"
    delete_section = root.find("delete")
    assert delete_section is not None
    assert delete_section.get("if-unused") == "true"
    assert delete_section[0].get("version") == "1"
