"""OpenStreetMap API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .env import optional_env_var
from .http_resilience import WRITE_SAFE_RETRY, RateLimit, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

OSM_API_URL = "https://api.openstreetmap.org"
OSM_TIMEOUT_SECONDS = 60.0
OSM_USER_AGENT = "aedsync/0.1"

DEFAULT_CHANGESET_TAGS: Mapping[str, str] = {
    "created_by": OSM_USER_AGENT,
    "source": "https://hjertestarterregister.113.no/ords/f?p=110:1",
    "bot": "yes",
}


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="osm",
        timeout_seconds=OSM_TIMEOUT_SECONDS,
        retry=WRITE_SAFE_RETRY,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        user_agent=OSM_USER_AGENT,
    )


@dataclass(frozen=True, slots=True)
class OsmConfig:
    """OSM API endpoint, optional write token and changeset tags.

    Reads work anonymously; ``access_token`` is only needed for live uploads.
    """

    api_url: str = OSM_API_URL
    access_token: str | None = None
    changeset_tags: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_CHANGESET_TAGS))
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_osm_config(*, resilience: ResilienceConfig | None = None) -> OsmConfig:
    return OsmConfig(
        api_url=optional_env_var("OSM_API_URL", OSM_API_URL) or OSM_API_URL,
        access_token=optional_env_var("OSM_AUTH_TOKEN"),
        resilience=resilience or _default_resilience(),
    )
