"""Validate, de-duplicate and geofence registry records."""

from __future__ import annotations

import math
from logging import getLogger
from typing import TYPE_CHECKING

from aedsync.domain.issues import IssueType
from aedsync.domain.registry import RegistryAsset

if TYPE_CHECKING:
    from collections.abc import Iterable

    from aedsync.domain.geo import Boundary
    from aedsync.domain.issues import IssueLog
    from aedsync.domain.registry import RegistryRecord

log = getLogger(__name__)


def validate_record(record: RegistryRecord) -> RegistryAsset | None:
    """Return an asset when the record has a GUID and finite coordinates."""

    guid = (record.guid or "").strip()
    lat, lon = record.latitude, record.longitude
    if not guid or lat is None or lon is None:
        return None
    if not math.isfinite(lat) or not math.isfinite(lon):
        return None
    return RegistryAsset(guid=guid, latitude=lat, longitude=lon, record=record)


def load_registry(
    records: Iterable[RegistryRecord],
    *,
    boundary: Boundary,
    issues: IssueLog,
) -> dict[str, RegistryAsset]:
    """Index accepted assets by GUID; rejected records only surface as issues."""

    accepted: dict[str, RegistryAsset] = {}
    seen: set[str] = set()
    duplicated: set[str] = set()
    total = 0
    for record in records:
        total += 1
        asset = validate_record(record)
        if asset is None:
            issues.warning(
                IssueType.REGISTER_MISSING_REQUIRED_DATA,
                "Register AED is missing a GUID or valid coordinates.",
                register_ref=(record.guid or "").strip() or None,
                details={"latitude": record.latitude, "longitude": record.longitude},
            )
            continue
        if asset.guid in seen:
            duplicated.add(asset.guid)
            continue
        seen.add(asset.guid)
        if not boundary.contains(asset.latitude, asset.longitude):
            issues.warning(
                IssueType.REGISTER_AED_OUTSIDE_BOUNDARY,
                f"Register AED {asset.guid} at {asset.latitude}, {asset.longitude} "
                "is outside the boundary.",
                register_ref=asset.guid,
                details={"location": {"lat": asset.latitude, "lon": asset.longitude}},
            )
            continue
        accepted[asset.guid] = asset

    for guid in sorted(duplicated):
        issues.error(
            IssueType.REGISTRY_DUPLICATE_REGISTER_REF,
            f"Duplicate register ref {guid} found in source registry payload.",
            register_ref=guid,
        )

    log.info("Accepted %d of %d register AEDs", len(accepted), total)
    return accepted
