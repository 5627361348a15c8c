"""Translate registry payloads into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aedsync.domain.registry import DayHours, RegistryRecord

if TYPE_CHECKING:
    from .schema import RegistryAssetPayload


def translate_asset(payload: RegistryAssetPayload) -> RegistryRecord:
    return RegistryRecord(
        guid=payload.guid,
        latitude=payload.latitude,
        longitude=payload.longitude,
        site_name=payload.site_name,
        site_address=payload.site_address,
        floor_number=payload.floor_number,
        description=payload.description,
        access_info=payload.access_info,
        manufacturer=payload.manufacturer,
        model=payload.model,
        weekly_hours=_weekly_hours(payload),
        closed_on_holidays=_holiday_flag(payload.closed_holidays),
    )


def _weekly_hours(payload: RegistryAssetPayload) -> tuple[DayHours, ...]:
    return (
        DayHours(payload.mon_from, payload.mon_to),
        DayHours(payload.tue_from, payload.tue_to),
        DayHours(payload.wed_from, payload.wed_to),
        DayHours(payload.thu_from, payload.thu_to),
        DayHours(payload.fri_from, payload.fri_to),
        DayHours(payload.sat_from, payload.sat_to),
        DayHours(payload.sun_from, payload.sun_to),
    )


def _holiday_flag(value: str | None) -> bool | None:
    flag = (value or "").upper()
    if flag == "Y":
        return True
    if flag == "N":
        return False
    return None
