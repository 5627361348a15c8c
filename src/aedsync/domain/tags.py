"""OSM tag vocabulary for defibrillators and tag-map operations.

Tag maps are plain ``dict[str, str]``; an absent key is distinct from an empty value. Tag
updates map keys to their new value, with ``None`` meaning "remove this key".
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

type TagMap = dict[str, str]
type TagUpdates = dict[str, str | None]


class AedTag(StrEnum):
    """Tag keys recognised as part of a standalone AED feature."""

    EMERGENCY = "emergency"
    NAME = "name"
    OPENING_HOURS = "opening_hours"
    ACCESS = "access"
    PHONE = "phone"
    EMAIL = "email"
    EMERGENCY_PHONE = "emergency:phone"
    LOCATION = "defibrillator:location"
    CODE = "defibrillator:code"
    INDOOR = "indoor"
    LOCKED = "locked"
    LEVEL = "level"
    DESCRIPTION = "description"
    MANUFACTURER = "manufacturer"
    MODEL = "model"
    CABINET = "defibrillator:cabinet"
    CABINET_MANUFACTURER = "defibrillator:cabinet:manufacturer"
    CABINET_COLOUR = "defibrillator:cabinet:colour"
    REGISTER_REF = "ref:hjertestarterregister"


REGISTER_REF_KEY: Final = AedTag.REGISTER_REF.value
OPT_OUT_KEY: Final = "note"
AED_EMERGENCY_VALUES: Final = frozenset({"defibrillator", "aed"})

AED_ONLY_KEYS: Final = frozenset(tag.value for tag in AedTag)

CONFLICT_KEYS: Final = frozenset(
    {"amenity", "leisure", "tourism", "shop", "office", "craft", "club"}
)

STRIP_KEYS: Final = (
    AedTag.EMERGENCY.value,
    AedTag.EMERGENCY_PHONE.value,
    AedTag.LOCATION.value,
    AedTag.CODE.value,
    AedTag.CABINET.value,
    AedTag.CABINET_MANUFACTURER.value,
    AedTag.CABINET_COLOUR.value,
    AedTag.REGISTER_REF.value,
)


def register_ref(tags: Mapping[str, str]) -> str | None:
    value = tags.get(REGISTER_REF_KEY)
    if value is None:
        return None
    return value.strip() or None


def is_opted_out(tags: Mapping[str, str]) -> bool:
    return OPT_OUT_KEY in tags


def is_aed_only(tags: Mapping[str, str]) -> bool:
    """Return whether every key belongs to the AED vocabulary and the node is an AED."""

    if tags.get(AedTag.EMERGENCY.value) not in AED_EMERGENCY_VALUES:
        return False
    return all(key in AED_ONLY_KEYS for key in tags)


def conflict_keys(tags: Mapping[str, str]) -> list[str]:
    return sorted(key for key in tags if key in CONFLICT_KEYS)


def has_conflict(tags: Mapping[str, str]) -> bool:
    return any(key in CONFLICT_KEYS for key in tags)


def strip_updates(tags: Mapping[str, str]) -> TagUpdates:
    """Updates removing the AED-specific keys present on a mixed feature."""

    return {key: None for key in STRIP_KEYS if key in tags}


def apply_updates(tags: Mapping[str, str], updates: Mapping[str, str | None]) -> TagMap:
    result = dict(tags)
    for key, value in updates.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = value
    return result


def diff_tags(current: Mapping[str, str], desired: Mapping[str, str]) -> TagUpdates:
    """Keys of ``desired`` whose value differs from ``current``; unrelated keys are kept."""

    return {key: value for key, value in desired.items() if current.get(key) != value}

