"""Overpass API client fetching every defibrillator in the target area."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from aedsync.adapters.http_resilience import ResilientClient
from aedsync.config.overpass import get_overpass_config
from aedsync.domain.ports.fetching import MapSnapshotFetcher

from .schema import OverpassResponse
from .translator import translate_element

if TYPE_CHECKING:
    from collections.abc import Callable

    from aedsync.config.http_resilience import ResilienceConfig
    from aedsync.config.overpass import OverpassConfig
    from aedsync.domain.features import MapElement

log = getLogger(__name__)


class OverpassAPIError(RuntimeError):
    """Raised when Overpass answers with an error status, a runtime remark or bad JSON."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_query(area_id: int, *, timeout_seconds: int) -> str:
    return (
        f"[out:json][timeout:{timeout_seconds}]; "
        f"area(id:{area_id})->.searchArea; "
        '(nwr["emergency"="defibrillator"](area.searchArea);); '
        "out geom;"
    )


def should_cache_snapshot(payload: object) -> bool:
    try:
        response = OverpassResponse.model_validate(payload)
    except ValidationError:
        return False
    return response.runtime_error is None


def _default_config() -> OverpassConfig:
    return get_overpass_config(cache_predicate=should_cache_snapshot)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class OverpassFetcher:
    config: OverpassConfig = field(default_factory=_default_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def __call__(self) -> list[MapElement]:
        query = build_query(self.config.area_id, timeout_seconds=self.config.query_timeout_seconds)
        async with self.client_factory(self.config.resilience) as client:
            response = await client.get(self.config.api_url, params={"data": query})

        if response.is_error:
            log.error(f"Overpass request failed with status {response.status_code}")
            raise OverpassAPIError(
                f"Overpass request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = OverpassResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise OverpassAPIError("Unexpected Overpass response payload") from exc

        if (remark := payload.runtime_error) is not None:
            log.error(f"Overpass runtime error: {remark}")
            raise OverpassAPIError(remark, status_code=response.status_code)

        log.info(f"Fetched {len(payload.elements)} elements from Overpass")
        return [translate_element(element) for element in payload.elements]


if TYPE_CHECKING:
    _fetcher_check: MapSnapshotFetcher = OverpassFetcher()
