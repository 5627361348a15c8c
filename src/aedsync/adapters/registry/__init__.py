"""Hjertestarterregisteret adapter package."""

from __future__ import annotations

from .client import AccessToken, RegistryAPIError, RegistryAPIFetcher, parse_asset_rows
from .schema import AssetSearchResponse, RegistryAssetPayload, TokenResponse
from .translator import translate_asset

__all__ = [
    "AccessToken",
    "AssetSearchResponse",
    "RegistryAPIError",
    "RegistryAPIFetcher",
    "RegistryAssetPayload",
    "TokenResponse",
    "parse_asset_rows",
    "translate_asset",
]
