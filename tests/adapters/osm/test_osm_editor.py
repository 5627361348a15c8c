from __future__ import annotations

import asyncio
from xml.etree import ElementTree as ET

import httpx
import pytest

from aedsync.adapters.osm import OsmAPIError, OsmAuthorizationError, OsmEditor
from aedsync.config.osm import OsmConfig
from aedsync.domain.plan import ChangePlan, CreateChange, DeleteChange, ModifyChange, PlannedNode
from tests.helpers.http import make_client_factory

API = "https://osm.test"


def _node_json(
    node_id: int, *, version: int, tags: dict[str, str], visible: bool = True
) -> dict[str, object]:
    return {
        "type": "node",
        "id": node_id,
        "lat": 59.9,
        "lon": 10.7,
        "version": version,
        "visible": visible,
        "tags": tags,
    }


class OsmServer:
    """Minimal OSM API 0.6 stand-in recording every request."""

    def __init__(self, nodes: dict[int, dict[str, object]] | None = None) -> None:
        self.nodes = nodes or {}
        self.requests: list[httpx.Request] = []
        self.upload_status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/api/0.6/nodes.json":
            ids = [int(value) for value in request.url.params["nodes"].split(",")]
            elements = [self.nodes[node_id] for node_id in ids if node_id in self.nodes]
            return httpx.Response(200, json={"version": "0.6", "elements": elements})
        if request.method == "GET" and path.startswith("/api/0.6/node/"):
            node_id = int(path.removeprefix("/api/0.6/node/").removesuffix(".json"))
            if node_id not in self.nodes:
                return httpx.Response(404, text="Not found")
            return httpx.Response(200, json={"version": "0.6", "elements": [self.nodes[node_id]]})
        if request.method == "PUT" and path == "/api/0.6/changeset/create":
            return httpx.Response(200, text="777")
        if request.method == "POST" and path == "/api/0.6/changeset/777/upload":
            return httpx.Response(self.upload_status, text="<diffResult/>")
        if request.method == "PUT" and path == "/api/0.6/changeset/777/close":
            return httpx.Response(200)
        return httpx.Response(500, text=f"unexpected {request.method} {path}")

    def calls(self) -> list[tuple[str, str]]:
        return [(request.method, request.url.path) for request in self.requests]


def _editor(server: OsmServer, *, token: str | None = "secret-token") -> OsmEditor:
    return OsmEditor(
        config=OsmConfig(api_url=API, access_token=token, changeset_tags={"bot": "yes"}),
        client_factory=make_client_factory(server),
    )


def _plan() -> ChangePlan:
    plan = ChangePlan()
    plan.add_create(
        CreateChange(
            node=PlannedNode(id=-1, lat=59.95, lon=10.75, version=0, tags={"emergency": "aed"}),
            register_ref="NEW",
        )
    )
    plan.add_modify(
        ModifyChange(
            before=PlannedNode(id=5, lat=59.9, lon=10.7, version=1, tags={"name": "Old"}),
            after=PlannedNode(id=5, lat=59.91, lon=10.71, version=1, tags={"name": "New"}),
            tag_updates={"name": "New", "level": None},
            register_ref="MOD",
        )
    )
    plan.add_delete(
        DeleteChange(node=PlannedNode(id=6, lat=59.9, lon=10.7, version=1), register_ref="DEL")
    )
    return plan


def test_get_node_reads_json_endpoint() -> None:
    server = OsmServer({5: _node_json(5, version=4, tags={"emergency": "defibrillator"})})

    node = asyncio.run(_editor(server).get_node(5))

    assert node.version == 4
    assert node.tags == {"emergency": "defibrillator"}
    assert server.calls() == [("GET", "/api/0.6/node/5.json")]


def test_get_node_raises_for_missing_node() -> None:
    with pytest.raises(OsmAPIError) as exc:
        asyncio.run(_editor(OsmServer()).get_node(9))

    assert exc.value.node_id == 9
    assert exc.value.status_code == 404


def test_get_nodes_skips_deleted_nodes() -> None:
    server = OsmServer(
        {
            1: _node_json(1, version=1, tags={}),
            2: _node_json(2, version=3, tags={}, visible=False),
        }
    )

    nodes = asyncio.run(_editor(server).get_nodes([1, 2, 1]))

    assert list(nodes) == [1]
    assert server.requests[0].url.params["nodes"] == "1,2"


def test_apply_changes_uploads_one_changeset_with_live_versions() -> None:
    server = OsmServer(
        {
            5: _node_json(5, version=8, tags={"name": "Old", "level": "1", "survey": "2020"}),
            6: _node_json(6, version=2, tags={"emergency": "defibrillator"}),
        }
    )

    result = asyncio.run(_editor(server).apply_changes(_plan(), comment_subject="AEDs"))

    assert result.changeset_id == 777
    assert (result.created, result.modified, result.deleted) == (1, 1, 1)
    assert server.calls() == [
        ("GET", "/api/0.6/nodes.json"),
        ("PUT", "/api/0.6/changeset/create"),
        ("POST", "/api/0.6/changeset/777/upload"),
        ("PUT", "/api/0.6/changeset/777/close"),
    ]

    create_request = server.requests[1]
    assert create_request.headers["Authorization"] == "Bearer secret-token"
    changeset_tags = {
        tag.get("k"): tag.get("v") for tag in ET.fromstring(create_request.content).iter("tag")
    }
    assert changeset_tags == {"bot": "yes", "comment": "Added, Modified, and Deleted AEDs"}

    upload = ET.fromstring(server.requests[2].content)
    modify_node = upload.find("modify/node")
    assert modify_node is not None
    assert modify_node.get("version") == "8"
    assert modify_node.get("lat") == "59.91"
    assert {tag.get("k"): tag.get("v") for tag in modify_node.iter("tag")} == {
        "name": "New",
        "survey": "2020",
    }
    delete_node = upload.find("delete/node")
    assert delete_node is not None
    assert delete_node.get("version") == "2"


def test_failed_upload_still_closes_changeset() -> None:
    server = OsmServer(
        {
            5: _node_json(5, version=8, tags={}),
            6: _node_json(6, version=2, tags={}),
        }
    )
    server.upload_status = 409

    with pytest.raises(OsmAPIError) as exc:
        asyncio.run(_editor(server).apply_changes(_plan(), comment_subject="AEDs"))

    assert exc.value.status_code == 409
    assert server.calls()[-1] == ("PUT", "/api/0.6/changeset/777/close")


def test_missing_live_node_aborts_before_opening_changeset() -> None:
    server = OsmServer({5: _node_json(5, version=8, tags={})})

    with pytest.raises(OsmAPIError, match="not found for delete"):
        asyncio.run(_editor(server).apply_changes(_plan(), comment_subject="AEDs"))

    assert [method for method, _ in server.calls()] == ["GET"]


def test_live_upload_requires_token() -> None:
    server = OsmServer()

    with pytest.raises(OsmAuthorizationError):
        asyncio.run(_editor(server, token=None).apply_changes(_plan(), comment_subject="AEDs"))

    assert server.requests == []


def test_empty_plan_sends_nothing() -> None:
    server = OsmServer()
    editor = _editor(server, token=None)

    result = asyncio.run(editor.apply_changes(ChangePlan(), comment_subject="x"))

    assert result.changeset_id is None
    assert server.requests == []

