"""Registry-side AED records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Weekday(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def osm_abbreviation(self) -> str:
        return ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su")[self.value]


@dataclass(slots=True, frozen=True)
class DayHours:
    """Integer-encoded opening interval, e.g. ``opens=900`` for 09:00."""

    opens: int | None = None
    closes: int | None = None


def _closed_week() -> tuple[DayHours, ...]:
    return tuple(DayHours() for _ in Weekday)


@dataclass(slots=True, frozen=True, kw_only=True)
class RegistryRecord:
    """One registry row as received; nothing is guaranteed to be present."""

    guid: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    site_name: str | None = None
    site_address: str | None = None
    floor_number: float | None = None
    description: str | None = None
    access_info: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    weekly_hours: tuple[DayHours, ...] = field(default_factory=_closed_week)
    closed_on_holidays: bool | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class RegistryAsset:
    """A registry record that passed validation and geofencing."""

    guid: str
    latitude: float
    longitude: float
    record: RegistryRecord

