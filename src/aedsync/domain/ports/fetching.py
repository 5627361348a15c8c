"""Ports for fetching the two snapshots a run reconciles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aedsync.domain.features import MapElement
    from aedsync.domain.registry import RegistryRecord


@runtime_checkable
class MapSnapshotFetcher(Protocol):
    """Callable port returning every AED-tagged element in the target area."""

    async def __call__(self) -> list[MapElement]: ...


@runtime_checkable
class RegistryFetcher(Protocol):
    """Callable port returning the raw registry rows."""

    async def __call__(self) -> list[RegistryRecord]: ...


__all__ = ["MapSnapshotFetcher", "RegistryFetcher"]
