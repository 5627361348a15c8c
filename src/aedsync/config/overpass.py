"""Overpass API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .env import env_float, env_int, optional_env_var
from .http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from .http_resilience import ShouldCacheHook

OVERPASS_API_URL = "https://overpass-api.de/api/interpreter"
NORWAY_AREA_ID = 3602978650
OVERPASS_QUERY_TIMEOUT_SECONDS = 60
OVERPASS_REQUEST_TIMEOUT_SECONDS = 90.0


def _default_resilience(
    *, cache_ttl_seconds: float = 0.0, cache_predicate: ShouldCacheHook | None = None
) -> ResilienceConfig:
    # Only a positive TTL enables the on-disk snapshot cache.
    cache = (
        CacheConfig(
            backend="sqlite",
            default_ttl_seconds=cache_ttl_seconds,
            should_cache=cache_predicate,
        )
        if cache_ttl_seconds > 0
        else None
    )
    return ResilienceConfig(
        name="overpass",
        timeout_seconds=OVERPASS_REQUEST_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=6, backoff_factor=1.0, max_backoff_wait=30.0),
        cache=cache,
    )


@dataclass(frozen=True, slots=True)
class OverpassConfig:
    api_url: str = OVERPASS_API_URL
    area_id: int = NORWAY_AREA_ID
    query_timeout_seconds: int = OVERPASS_QUERY_TIMEOUT_SECONDS
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_overpass_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> OverpassConfig:
    return OverpassConfig(
        api_url=optional_env_var("OVERPASS_API_URL", OVERPASS_API_URL) or OVERPASS_API_URL,
        area_id=env_int("OVERPASS_AREA_ID", NORWAY_AREA_ID),
        resilience=resilience
        or _default_resilience(
            cache_ttl_seconds=env_float("OVERPASS_CACHE_TTL_SECONDS", 0.0),
            cache_predicate=cache_predicate,
        ),
    )
