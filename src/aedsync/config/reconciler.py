"""Reconciliation thresholds, run mode and output locations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_flag, env_float, optional_env_var

DEFAULT_CHANGED_LOCATION_DISTANCE_METERS: Final[float] = 10.0
DEFAULT_NEARBY_AED_DISTANCE_METERS: Final[float] = 20.0
DEFAULT_UNMANAGED_MERGE_DISTANCE_METERS: Final[float] = 15.0
DEFAULT_MAX_DELETE_FRACTION: Final[float] = 0.1
DEFAULT_OSC_OUTPUT_PATH: Final[str] = "dry-run-changes.osc"
DEFAULT_GEOJSON_OUTPUT_PATH: Final[str] = "dry-run-changes.geojson"
DEFAULT_COMMENT_SUBJECT: Final[str] = "AED locations from Hjertestarterregisteret"


@dataclass(frozen=True, slots=True)
class ReconcilerConfig:
    """Knobs for one reconciliation run.

    Distances are metres. ``max_delete_fraction`` is compared against planned deletes divided
    by the number of managed nodes seen in the map snapshot.
    """

    dry_run: bool = True
    changed_location_distance_m: float = DEFAULT_CHANGED_LOCATION_DISTANCE_METERS
    nearby_aed_distance_m: float = DEFAULT_NEARBY_AED_DISTANCE_METERS
    unmanaged_merge_distance_m: float = DEFAULT_UNMANAGED_MERGE_DISTANCE_METERS
    max_delete_fraction: float = DEFAULT_MAX_DELETE_FRACTION
    osc_output_path: Path = Path(DEFAULT_OSC_OUTPUT_PATH)
    geojson_output_path: Path = Path(DEFAULT_GEOJSON_OUTPUT_PATH)
    boundary_path: Path | None = None
    comment_subject: str = DEFAULT_COMMENT_SUBJECT


def get_reconciler_config() -> ReconcilerConfig:
    boundary = optional_env_var("BOUNDARY_GEOJSON_PATH")
    return ReconcilerConfig(
        dry_run=env_flag("DRY_RUN", default=True),
        changed_location_distance_m=env_float(
            "CHANGED_LOCATION_DISTANCE_METERS", DEFAULT_CHANGED_LOCATION_DISTANCE_METERS
        ),
        nearby_aed_distance_m=env_float(
            "NEARBY_AED_DISTANCE_METERS", DEFAULT_NEARBY_AED_DISTANCE_METERS
        ),
        unmanaged_merge_distance_m=env_float(
            "UNMANAGED_MERGE_DISTANCE_METERS", DEFAULT_UNMANAGED_MERGE_DISTANCE_METERS
        ),
        max_delete_fraction=env_float("MAX_DELETE_FRACTION", DEFAULT_MAX_DELETE_FRACTION),
        osc_output_path=Path(optional_env_var("DRY_RUN_OSC_PATH", DEFAULT_OSC_OUTPUT_PATH) or ""),
        geojson_output_path=Path(
            optional_env_var("DRY_RUN_GEOJSON_PATH", DEFAULT_GEOJSON_OUTPUT_PATH) or ""
        ),
        boundary_path=Path(boundary) if boundary else None,
    )
