from __future__ import annotations

from aedsync.adapters.registry import AssetSearchResponse, RegistryAssetPayload, translate_asset
from aedsync.domain.registry import DayHours

ASSET = {
    "ASSET_GUID": 1234,
    "SITE_LATITUDE": "59,9139",
    "SITE_LONGITUDE": 10.7522,
    "SITE_NAME": "  Oslo rådhus ",
    "SITE_ADDRESS": "",
    "SITE_FLOOR_NUMBER": "2",
    "SITE_DESCRIPTION": "Ved hovedinngangen",
    "MANUFACTURER_NAME": "ZOLL",
    "ASSET_TYPE_NAME": "AED Plus",
    "OPENING_HOURS_MON_FROM": 800,
    "OPENING_HOURS_MON_TO": "1600",
    "OPENING_HOURS_TUE_FROM": "abc",
    "OPENING_HOURS_TUE_TO": 1600,
    "OPENING_HOURS_CLOSED_HOLIDAYS": "y",
    "UNRELATED_FIELD": "ignored",
}


def test_payload_normalises_registry_quirks() -> None:
    payload = RegistryAssetPayload.model_validate(ASSET)

    assert payload.guid == "1234"
    assert payload.latitude == 59.9139
    assert payload.site_name == "Oslo rådhus"
    assert payload.site_address is None
    assert payload.floor_number == 2.0
    assert payload.mon_to == 1600
    assert payload.tue_from is None


def test_non_finite_and_garbage_coordinates_become_none() -> None:
    payload = RegistryAssetPayload.model_validate(
        {"ASSET_GUID": " ", "SITE_LATITUDE": "NaN", "SITE_LONGITUDE": {"x": 1}}
    )

    assert payload.guid is None
    assert payload.latitude is None
    assert payload.longitude is None


def test_translate_asset_builds_weekly_hours_and_holiday_flag() -> None:
    record = translate_asset(RegistryAssetPayload.model_validate(ASSET))

    assert record.guid == "1234"
    assert record.weekly_hours[0] == DayHours(800, 1600)
    assert record.weekly_hours[1] == DayHours(None, 1600)
    assert len(record.weekly_hours) == 7
    assert record.closed_on_holidays is True
    assert record.manufacturer == "ZOLL"
    assert record.model == "AED Plus"


def test_holiday_flag_values() -> None:
    def flag(value: object) -> bool | None:
        payload = RegistryAssetPayload.model_validate({"OPENING_HOURS_CLOSED_HOLIDAYS": value})
        return translate_asset(payload).closed_on_holidays

    assert flag("N") is False
    assert flag("maybe") is None
    assert flag(None) is None


def test_search_response_defaults_to_no_assets() -> None:
    response = AssetSearchResponse.model_validate({"API_MESSAGE": "OK"})

    assert response.assets == []
    assert response.api_message == "OK"
