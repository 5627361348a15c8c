"""Pydantic models describing the Hjertestarterregisteret API payloads."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _scalar_text(value: object) -> object:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return _blank_to_none(value)


def _lenient_float(value: object) -> float | None:
    """Coerce numbers and numeric strings; anything else becomes ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", "."))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _lenient_int(value: object) -> int | None:
    number = _lenient_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


class RegistryBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RegistryAssetPayload(RegistryBaseModel):
    guid: str | None = Field(default=None, alias="ASSET_GUID")
    latitude: float | None = Field(default=None, alias="SITE_LATITUDE")
    longitude: float | None = Field(default=None, alias="SITE_LONGITUDE")
    site_name: str | None = Field(default=None, alias="SITE_NAME")
    site_address: str | None = Field(default=None, alias="SITE_ADDRESS")
    floor_number: float | None = Field(default=None, alias="SITE_FLOOR_NUMBER")
    description: str | None = Field(default=None, alias="SITE_DESCRIPTION")
    access_info: str | None = Field(default=None, alias="SITE_ACCESS_INFO")
    manufacturer: str | None = Field(default=None, alias="MANUFACTURER_NAME")
    model: str | None = Field(default=None, alias="ASSET_TYPE_NAME")

    mon_from: int | None = Field(default=None, alias="OPENING_HOURS_MON_FROM")
    mon_to: int | None = Field(default=None, alias="OPENING_HOURS_MON_TO")
    tue_from: int | None = Field(default=None, alias="OPENING_HOURS_TUE_FROM")
    tue_to: int | None = Field(default=None, alias="OPENING_HOURS_TUE_TO")
    wed_from: int | None = Field(default=None, alias="OPENING_HOURS_WED_FROM")
    wed_to: int | None = Field(default=None, alias="OPENING_HOURS_WED_TO")
    thu_from: int | None = Field(default=None, alias="OPENING_HOURS_THU_FROM")
    thu_to: int | None = Field(default=None, alias="OPENING_HOURS_THU_TO")
    fri_from: int | None = Field(default=None, alias="OPENING_HOURS_FRI_FROM")
    fri_to: int | None = Field(default=None, alias="OPENING_HOURS_FRI_TO")
    sat_from: int | None = Field(default=None, alias="OPENING_HOURS_SAT_FROM")
    sat_to: int | None = Field(default=None, alias="OPENING_HOURS_SAT_TO")
    sun_from: int | None = Field(default=None, alias="OPENING_HOURS_SUN_FROM")
    sun_to: int | None = Field(default=None, alias="OPENING_HOURS_SUN_TO")
    closed_holidays: str | None = Field(default=None, alias="OPENING_HOURS_CLOSED_HOLIDAYS")

    @field_validator("guid", mode="before")
    @classmethod
    def _coerce_guid(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return _blank_to_none(value)

    _normalize_text = field_validator(
        "site_name",
        "site_address",
        "description",
        "access_info",
        "manufacturer",
        "model",
        "closed_holidays",
        mode="before",
    )(_scalar_text)

    _normalize_coordinates = field_validator(
        "latitude", "longitude", "floor_number", mode="before"
    )(_lenient_float)

    _normalize_hours = field_validator(
        "mon_from",
        "mon_to",
        "tue_from",
        "tue_to",
        "wed_from",
        "wed_to",
        "thu_from",
        "thu_to",
        "fri_from",
        "fri_to",
        "sat_from",
        "sat_to",
        "sun_from",
        "sun_to",
        mode="before",
    )(_lenient_int)


class AssetSearchResponse(RegistryBaseModel):
    """Asset rows stay raw so each one can be validated, and rejected, on its own."""

    assets: list[object] = Field(default_factory=list[object], alias="ASSETS")
    api_message: str | None = Field(default=None, alias="API_MESSAGE")


class TokenResponse(RegistryBaseModel):
    access_token: str
    token_type: str
    expires_in: float
