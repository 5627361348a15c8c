"""Hjertestarterregisteret API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import ResilienceConfig, RetryPolicy

REGISTRY_API_BASE_URL = "https://hjertestarterregister.113.no/ords/api/v1/"
REGISTRY_OAUTH_TOKEN_URL = "https://hjertestarterregister.113.no/ords/api/oauth/token"
REGISTRY_TIMEOUT_SECONDS = 60.0
REGISTRY_MAX_ROWS = 50_000
TOKEN_SAFETY_WINDOW_SECONDS = 60.0


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="hjertestarterregister",
        timeout_seconds=REGISTRY_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
    )


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Holds registry API credentials and endpoints."""

    client_id: str
    client_secret: str
    base_url: str = REGISTRY_API_BASE_URL
    oauth_token_url: str = REGISTRY_OAUTH_TOKEN_URL
    max_rows: int = REGISTRY_MAX_ROWS
    token_safety_window_seconds: float = TOKEN_SAFETY_WINDOW_SECONDS
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_registry_config(*, resilience: ResilienceConfig | None = None) -> RegistryConfig:
    values = require_env_vars(
        ("HJERTESTARTERREGISTER_CLIENT_ID", "HJERTESTARTERREGISTER_CLIENT_SECRET")
    )
    base_url = optional_env_var("HJERTESTARTERREGISTER_API_BASE_URL", REGISTRY_API_BASE_URL)
    token_url = optional_env_var("HJERTESTARTERREGISTER_OAUTH_TOKEN_URL", REGISTRY_OAUTH_TOKEN_URL)
    return RegistryConfig(
        client_id=values["HJERTESTARTERREGISTER_CLIENT_ID"],
        client_secret=values["HJERTESTARTERREGISTER_CLIENT_SECRET"],
        base_url=base_url or REGISTRY_API_BASE_URL,
        oauth_token_url=token_url or REGISTRY_OAUTH_TOKEN_URL,
        resilience=resilience or _default_resilience(),
    )
