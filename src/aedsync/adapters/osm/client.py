"""OSM API 0.6 client: live node reads and single-changeset uploads."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from aedsync.adapters.http_resilience import ResilientClient
from aedsync.config.osm import get_osm_config
from aedsync.domain.features import MapNode
from aedsync.domain.ports.map_editing import ChangesetResult, MapEditor
from aedsync.domain.tags import apply_updates

from .osmchange import build_changeset_comment, changeset_document, osmchange_document
from .schema import OsmElementsResponse, OsmNodePayload

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    import httpx

    from aedsync.config.http_resilience import ResilienceConfig
    from aedsync.config.osm import OsmConfig
    from aedsync.domain.plan import ChangePlan

log = getLogger(__name__)

NODES_PER_REQUEST: Final = 100
_XML_HEADERS: Final = {"Content-Type": "text/xml; charset=utf-8"}


class OsmAPIError(RuntimeError):
    """Raised when an OSM API call fails or returns something unusable."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        node_id: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.node_id = node_id
        self.response_body = response_body


class OsmAuthorizationError(OsmAPIError):
    """Raised before any write when no access token is configured."""


def _to_node(payload: OsmNodePayload) -> MapNode:
    if payload.lat is None or payload.lon is None:
        raise OsmAPIError(f"OSM node {payload.id} has no position", node_id=payload.id)
    return MapNode(
        id=payload.id,
        lat=payload.lat,
        lon=payload.lon,
        version=payload.version,
        tags=dict(payload.tags),
    )


def _chunks(ids: list[int], size: int) -> Iterable[list[int]]:
    for start in range(0, len(ids), size):
        yield ids[start : start + size]


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class OsmEditor:
    config: OsmConfig = field(default_factory=get_osm_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    @property
    def api_base(self) -> str:
        return f"{self.config.api_url.rstrip('/')}/api/0.6/"

    async def get_node(self, node_id: int) -> MapNode:
        async with self.client_factory(self.config.resilience) as client:
            response = await client.get(f"{self.api_base}node/{node_id}.json")
        if response.status_code in {404, 410}:
            raise OsmAPIError(
                f"OSM node {node_id} not found", status_code=response.status_code, node_id=node_id
            )
        self._raise_for_status(response, f"Reading node {node_id} failed")
        nodes = self._parse_nodes(response)
        node = nodes.get(node_id)
        if node is None:
            raise OsmAPIError(f"OSM node {node_id} not found", node_id=node_id)
        return node

    async def get_nodes(self, node_ids: Iterable[int]) -> dict[int, MapNode]:
        ids = list(dict.fromkeys(node_ids))
        if not ids:
            return {}
        async with self.client_factory(self.config.resilience) as client:
            return await self._fetch_nodes(client, ids)

    async def apply_changes(self, plan: ChangePlan, *, comment_subject: str) -> ChangesetResult:
        """Upload ``plan`` as one changeset.

        Modified and deleted nodes are re-read first so the upload carries live versions, and
        tag updates are applied onto the live tags rather than the planned ones.
        """

        if plan.is_empty:
            log.info("No changes to upload")
            return ChangesetResult(changeset_id=None)
        if not self.config.access_token:
            raise OsmAuthorizationError(
                "Missing OSM auth configuration; set OSM_AUTH_TOKEN for live uploads."
            )

        async with self.client_factory(self.config.resilience) as client:
            existing_ids = [change.after.id for change in plan.modify]
            existing_ids.extend(change.node.id for change in plan.delete)
            live = await self._fetch_nodes(client, list(dict.fromkeys(existing_ids)))

            create_nodes = [
                MapNode(
                    id=change.node.id,
                    lat=change.node.lat,
                    lon=change.node.lon,
                    tags=dict(change.node.tags),
                )
                for change in plan.create
            ]
            modify_nodes: list[MapNode] = []
            for change in plan.modify:
                current = self._require(live, change.after.id, "modify")
                modify_nodes.append(
                    current.moved(
                        change.after.lat,
                        change.after.lon,
                        apply_updates(current.tags, change.tag_updates),
                    )
                )
            delete_nodes = [self._require(live, change.node.id, "delete") for change in plan.delete]

            tags = dict(self.config.changeset_tags)
            tags["comment"] = build_changeset_comment(
                created=len(create_nodes),
                modified=len(modify_nodes),
                deleted=len(delete_nodes),
                subject=comment_subject,
            )
            changeset_id = await self._open_changeset(client, tags)
            try:
                document = osmchange_document(
                    changeset_id=changeset_id,
                    create=create_nodes,
                    modify=modify_nodes,
                    delete=delete_nodes,
                )
                response = await client.post(
                    f"{self.api_base}changeset/{changeset_id}/upload",
                    content=document,
                    headers=self._write_headers(),
                )
                self._raise_for_status(response, "Changeset upload failed")
            finally:
                await self._close_changeset(client, changeset_id)

        log.info(
            f"Uploaded changeset {changeset_id}: {len(create_nodes)} created, "
            f"{len(modify_nodes)} modified, {len(delete_nodes)} deleted"
        )
        return ChangesetResult(
            changeset_id=changeset_id,
            created=len(create_nodes),
            modified=len(modify_nodes),
            deleted=len(delete_nodes),
        )

    def _write_headers(self) -> dict[str, str]:
        return {**_XML_HEADERS, "Authorization": f"Bearer {self.config.access_token}"}

    @staticmethod
    def _require(live: dict[int, MapNode], node_id: int, operation: str) -> MapNode:
        node = live.get(node_id)
        if node is None:
            raise OsmAPIError(f"OSM node {node_id} not found for {operation}", node_id=node_id)
        return node

    async def _fetch_nodes(self, client: ResilientClient, ids: list[int]) -> dict[int, MapNode]:
        nodes: dict[int, MapNode] = {}
        for chunk in _chunks(ids, NODES_PER_REQUEST):
            response = await client.get(
                f"{self.api_base}nodes.json",
                params={"nodes": ",".join(str(node_id) for node_id in chunk)},
            )
            self._raise_for_status(response, "Reading nodes failed")
            nodes.update(self._parse_nodes(response))
        return nodes

    @staticmethod
    def _parse_nodes(response: httpx.Response) -> dict[int, MapNode]:
        try:
            payload = OsmElementsResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise OsmAPIError(
                "Unexpected OSM node payload",
                status_code=response.status_code,
                url=str(response.request.url),
            ) from exc
        return {
            element.id: _to_node(element) for element in payload.elements if element.is_live
        }

    async def _open_changeset(self, client: ResilientClient, tags: dict[str, str]) -> int:
        response = await client.put(
            f"{self.api_base}changeset/create",
            content=changeset_document(tags),
            headers=self._write_headers(),
        )
        self._raise_for_status(response, "Changeset creation failed")
        text = response.text.strip()
        if not text.isdigit():
            raise OsmAPIError(
                "Changeset creation returned no id",
                status_code=response.status_code,
                response_body=text,
            )
        log.debug(f"Opened changeset {text}")
        return int(text)

    async def _close_changeset(self, client: ResilientClient, changeset_id: int) -> None:
        response = await client.put(
            f"{self.api_base}changeset/{changeset_id}/close",
            headers=self._write_headers(),
        )
        self._raise_for_status(response, f"Closing changeset {changeset_id} failed")

    @staticmethod
    def _raise_for_status(response: httpx.Response, context: str) -> None:
        if not response.is_error:
            return
        message = f"{context} with status {response.status_code}"
        log.error(f"{message}: {response.text}")
        raise OsmAPIError(
            message,
            status_code=response.status_code,
            url=str(response.request.url),
            response_body=response.text,
        )


if TYPE_CHECKING:
    _editor_check: MapEditor = OsmEditor()
