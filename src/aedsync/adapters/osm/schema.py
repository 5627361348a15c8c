"""Pydantic models for the OSM API 0.6 JSON read endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OsmBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OsmNodePayload(OsmBaseModel):
    type: Literal["node"]
    id: int
    lat: float | None = None
    lon: float | None = None
    version: int | None = None
    visible: bool = True
    tags: dict[str, str] = Field(default_factory=dict)

    @property
    def is_live(self) -> bool:
        return self.visible and self.lat is not None and self.lon is not None


class OsmElementsResponse(OsmBaseModel):
    version: str | None = None
    elements: list[OsmNodePayload] = Field(default_factory=list)
