"""HTTP client for the Hjertestarterregisteret asset API."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, cast
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError

from aedsync.adapters.http_resilience import ResilientClient
from aedsync.config.registry import get_registry_config
from aedsync.domain.ports.fetching import RegistryFetcher

from .schema import AssetSearchResponse, RegistryAssetPayload, TokenResponse
from .translator import translate_asset

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from aedsync.config.http_resilience import ResilienceConfig
    from aedsync.config.registry import RegistryConfig
    from aedsync.domain.registry import RegistryRecord

log = getLogger(__name__)

ASSET_SEARCH_PATH = "assets/search/"
_JSON_HEADERS = {"Accept": "application/json"}


class RegistryAPIError(RuntimeError):
    """Raised for failed token or search requests and for unusable response bodies."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        api_error: str | None = None,
        api_message: str | None = None,
        response_body: object = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.api_error = api_error
        self.api_message = api_message
        self.response_body = response_body


def parse_asset_rows(rows: Sequence[object]) -> list[RegistryAssetPayload]:
    """Validate rows one by one; malformed rows are logged and dropped."""

    assets: list[RegistryAssetPayload] = []
    for index, row in enumerate(rows):
        try:
            assets.append(RegistryAssetPayload.model_validate(row))
        except ValidationError as exc:
            guid = row.get("ASSET_GUID") if isinstance(row, dict) else None
            log.warning(
                f"Skipping malformed registry asset row {index} (ASSET_GUID={guid!r}): "
                f"{exc.error_count()} validation error(s)"
            )
    return assets


@dataclass(slots=True, frozen=True)
class AccessToken:
    value: str
    token_type: str
    expires_at: float

    def is_fresh(self, now: float, *, safety_window: float) -> bool:
        return now < self.expires_at - safety_window


def _string_field(payload: Mapping[str, object], key: str) -> str | None:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _error_message(payload: Mapping[str, object], fallback: str) -> str:
    for key in ("API_ERROR", "error_description", "error", "API_MESSAGE"):
        if (value := _string_field(payload, key)) is not None:
            return value
    return fallback


def _parse_object(response: httpx.Response) -> dict[str, object]:
    """Decode a JSON object body; an empty body counts as ``{}``."""

    if not response.content.strip():
        return {}
    try:
        payload = response.json()
    except ValueError as exc:
        raise RegistryAPIError(
            "Response body was not valid JSON.",
            status_code=response.status_code,
            url=str(response.request.url),
            response_body=response.text,
        ) from exc
    if not isinstance(payload, dict):
        raise RegistryAPIError(
            "API returned a non-object JSON payload.",
            status_code=response.status_code,
            url=str(response.request.url),
            response_body=payload,
        )
    return cast("dict[str, object]", payload)


def _raise_for_payload(
    response: httpx.Response, payload: Mapping[str, object], *, fallback: str
) -> None:
    api_error = _string_field(payload, "API_ERROR")
    if not response.is_error and api_error is None:
        return
    message = _error_message(payload, fallback)
    log.error(f"Registry request to {response.request.url} failed: {message}")
    raise RegistryAPIError(
        message,
        status_code=response.status_code,
        url=str(response.request.url),
        api_error=api_error,
        api_message=_string_field(payload, "API_MESSAGE"),
        response_body=dict(payload),
    )


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class RegistryAPIFetcher:
    """Fetch every registry asset using client-credentials OAuth.

    The access token is cached on the instance until it is within the safety window of
    expiring; concurrent callers share a single in-flight token request.
    """

    config: RegistryConfig = field(default_factory=get_registry_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    clock: Callable[[], float] = field(default=time.monotonic)
    _token: AccessToken | None = field(default=None, init=False, repr=False)
    _token_task: asyncio.Task[AccessToken] | None = field(default=None, init=False, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def __call__(self) -> list[RegistryRecord]:
        async with self.client_factory(self.config.resilience) as client:
            response = await self.search_assets(client, max_rows=self.config.max_rows)
        log.info(f"Fetched {len(response.assets)} assets from the registry")
        return [translate_asset(asset) for asset in parse_asset_rows(response.assets)]

    async def search_assets(self, client: ResilientClient, *, max_rows: int) -> AssetSearchResponse:
        token = await self.access_token(client)
        url = urljoin(self.config.base_url, ASSET_SEARCH_PATH)
        response = await client.get(
            url,
            params={"max_rows": max_rows},
            headers={**_JSON_HEADERS, "Authorization": f"Bearer {token.value}"},
        )
        payload = _parse_object(response)
        _raise_for_payload(
            response, payload, fallback=f"Request failed with status {response.status_code}."
        )
        try:
            return AssetSearchResponse.model_validate(payload)
        except ValidationError as exc:
            raise RegistryAPIError(
                "Unexpected registry search payload.",
                status_code=response.status_code,
                url=url,
                response_body=payload,
            ) from exc

    async def access_token(self, client: ResilientClient) -> AccessToken:
        token = self._token
        if token is not None and token.is_fresh(
            self.clock(), safety_window=self.config.token_safety_window_seconds
        ):
            return token

        async with self._lock:
            task = self._token_task
            if task is None:
                task = asyncio.ensure_future(self._request_token(client))
                self._token_task = task
        try:
            token = await task
        finally:
            if self._token_task is task:
                self._token_task = None
        self._token = token
        return token

    def invalidate_token(self) -> None:
        self._token = None

    async def _request_token(self, client: ResilientClient) -> AccessToken:
        log.debug("Requesting registry access token")
        response = await client.post(
            self.config.oauth_token_url,
            data={"grant_type": "client_credentials"},
            headers=_JSON_HEADERS,
            auth=httpx.BasicAuth(self.config.client_id, self.config.client_secret),
        )
        payload = _parse_object(response)
        _raise_for_payload(
            response,
            payload,
            fallback=f"OAuth token request failed with status {response.status_code}.",
        )
        try:
            parsed = TokenResponse.model_validate(payload)
        except ValidationError as exc:
            raise RegistryAPIError(
                "OAuth token response did not match expected structure.",
                status_code=response.status_code,
                url=self.config.oauth_token_url,
                response_body=payload,
            ) from exc
        return AccessToken(
            value=parsed.access_token,
            token_type=parsed.token_type,
            expires_at=self.clock() + parsed.expires_in,
        )


if TYPE_CHECKING:
    _fetcher_check: RegistryFetcher = RegistryAPIFetcher()
