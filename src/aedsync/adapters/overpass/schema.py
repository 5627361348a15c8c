"""Minimal Pydantic models for Overpass ``[out:json]`` responses."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OverpassBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class OverpassPoint(OverpassBaseModel):
    lat: float
    lon: float


class OverpassElement(OverpassBaseModel):
    type: Literal["node", "way", "relation"]
    id: int
    lat: float | None = None
    lon: float | None = None
    version: int | None = None
    tags: dict[str, str] = Field(default_factory=dict)
    geometry: list[OverpassPoint | None] = Field(default_factory=list["OverpassPoint | None"])
    center: OverpassPoint | None = None


class OverpassResponse(OverpassBaseModel):
    version: float | None = None
    generator: str | None = None
    remark: str | None = None
    elements: list[OverpassElement] = Field(default_factory=list["OverpassElement"])

    @property
    def runtime_error(self) -> str | None:
        if self.remark and "error" in self.remark.lower():
            return self.remark.strip()
        return None
