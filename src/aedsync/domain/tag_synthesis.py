"""Derive canonical OSM tags from a registry asset."""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Final

from aedsync.domain.issues import IssueType
from aedsync.domain.opening_hours import build_opening_hours
from aedsync.domain.tags import AedTag

if TYPE_CHECKING:
    from collections.abc import Iterable

    from aedsync.domain.issues import IssueLog
    from aedsync.domain.registry import RegistryAsset
    from aedsync.domain.tags import TagMap

MAX_TAG_VALUE_LENGTH: Final = 255
EMERGENCY_PHONE: Final = "113"
LIST_SEPARATOR: Final = "; "

_NEWLINES = re.compile(r"[\r\n]+")
_WHITESPACE = re.compile(r"\s+")
_SPACE_BEFORE_DOT = re.compile(r"\s\.")
_DOTS = re.compile(r"\.+")
_EMAIL = re.compile(r"([a-zA-Z0-9._-]+@[a-zA-Z0-9._-]+\.[a-zA-Z0-9._-]+)")
_PHONE = re.compile(r"(?:\+47\s?)?(\d{2}\s?\d{2}\s?\d{2}\s?\d{2}|\d{3}\s?\d{2}\s?\d{3})")
_ROTAID = re.compile(r"Rotaid", re.IGNORECASE)
_GREEN_CABINET = re.compile(r"\bgrønt(?:\s+rundt)?(?:\s+varme)?\s*skap\b", re.IGNORECASE)


def normalize_text(value: str) -> str:
    """Flatten free text into a single line of sentences."""

    cleaned = _NEWLINES.sub(". ", value)
    cleaned = _WHITESPACE.sub(" ", cleaned)
    cleaned = _SPACE_BEFORE_DOT.sub(".", cleaned)
    cleaned = _DOTS.sub(".", cleaned)
    return cleaned.strip()


def extract_emails(description: str) -> list[str]:
    return _unique(match.group(1) for match in _EMAIL.finditer(description))


def format_phone(raw: str) -> str | None:
    """Normalise a matched Norwegian number to ``+47 xx xx xx xx`` or ``+47 4xx xx xxx``."""

    digits = re.sub(r"\s", "", raw)
    if len(digits) == 8:
        return f"+47 {digits[0:2]} {digits[2:4]} {digits[4:6]} {digits[6:8]}"
    if len(digits) == 9 and digits.startswith("4"):
        return f"+47 {digits[0:3]} {digits[3:5]} {digits[5:8]}"
    return None


def extract_phones(description: str) -> list[str]:
    formatted = (format_phone(match.group(1)) for match in _PHONE.finditer(description))
    return _unique(phone for phone in formatted if phone)


def detect_cabinet(description: str) -> TagMap:
    tags: TagMap = {}
    if _ROTAID.search(description):
        tags[AedTag.CABINET] = "twist"
        tags[AedTag.CABINET_MANUFACTURER] = "Rotaid"
    if _GREEN_CABINET.search(description):
        tags[AedTag.CABINET_COLOUR] = "green"
    return tags


def format_level(floor: float | None) -> str | None:
    if floor is None or isinstance(floor, bool) or not math.isfinite(floor):
        return None
    if float(floor).is_integer():
        return str(int(floor))
    return str(floor)


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


class TagSynthesizer:
    """Build canonical tags per asset, memoised by GUID.

    Over-long values are dropped and reported once per asset and tag, however many phases
    ask for the same asset's tags.
    """

    def __init__(self, issues: IssueLog) -> None:
        self._issues = issues
        self._cache: dict[str, TagMap] = {}

    def __call__(self, asset: RegistryAsset) -> TagMap:
        cached = self._cache.get(asset.guid)
        if cached is None:
            cached = self._synthesize(asset)
            self._cache[asset.guid] = cached
        return dict(cached)

    def _synthesize(self, asset: RegistryAsset) -> TagMap:
        record = asset.record
        tags: TagMap = {
            AedTag.EMERGENCY: "defibrillator",
            AedTag.EMERGENCY_PHONE: EMERGENCY_PHONE,
            AedTag.REGISTER_REF: asset.guid,
        }

        self._put(tags, asset, AedTag.NAME, record.site_name)
        level = format_level(record.floor_number)
        if level is not None:
            tags[AedTag.LEVEL] = level
        self._put(tags, asset, AedTag.LOCATION, record.description)
        self._put(tags, asset, AedTag.MANUFACTURER, record.manufacturer)
        self._put(tags, asset, AedTag.MODEL, record.model)

        description = record.description or ""
        emails = [
            email
            for email in (self._clean(asset, AedTag.EMAIL, e) for e in extract_emails(description))
            if email
        ]
        if emails:
            tags[AedTag.EMAIL] = LIST_SEPARATOR.join(_unique(emails))
        phones = extract_phones(description)
        if phones:
            tags[AedTag.PHONE] = LIST_SEPARATOR.join(phones)

        opening_hours = build_opening_hours(
            record.weekly_hours, closed_on_holidays=record.closed_on_holidays
        )
        if opening_hours:
            tags[AedTag.OPENING_HOURS] = opening_hours

        tags.update(detect_cabinet(description))
        return {str(key): value for key, value in tags.items()}

    def _put(self, tags: TagMap, asset: RegistryAsset, key: AedTag, raw: str | None) -> None:
        value = self._clean(asset, key, raw)
        if value:
            tags[key] = value

    def _clean(self, asset: RegistryAsset, key: AedTag, raw: str | None) -> str | None:
        if raw is None:
            return None
        value = normalize_text(raw)
        if not value:
            return None
        if len(value) >= MAX_TAG_VALUE_LENGTH:
            self._issues.warning(
                IssueType.TAG_VALUE_TOO_LONG,
                f"Skipped {key} for register AED {asset.guid}: value is {len(value)} characters.",
                register_ref=asset.guid,
                details={"tag": str(key), "length": len(value), "limit": MAX_TAG_VALUE_LENGTH},
            )
            return None
        return value
