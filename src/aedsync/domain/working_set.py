"""Mutable view of the map used for "already represented nearby" checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from aedsync.domain.features import ElementKind
from aedsync.domain.geo import haversine_m

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from aedsync.domain.features import MapElement, MapNode


@dataclass(slots=True, frozen=True)
class NearbyElement:
    element: MapElement
    distance_m: float


class WorkingFeatures:
    """Ordered element list that the planning phases prune and patch as they go.

    Node slots are replaced in place so that later phases see planned positions and tags
    without the snapshot itself changing.
    """

    def __init__(self, elements: Iterable[MapElement]) -> None:
        self._elements: list[MapElement] = list(elements)

    def __iter__(self) -> Iterator[MapElement]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def _node_index(self) -> dict[int, int]:
        return {
            element.id: index
            for index, element in enumerate(self._elements)
            if element.kind is ElementKind.NODE
        }

    def remove_nodes(self, node_ids: Iterable[int]) -> int:
        doomed = set(node_ids)
        if not doomed:
            return 0
        before = len(self._elements)
        self._elements = [
            element
            for element in self._elements
            if element.kind is not ElementKind.NODE or element.id not in doomed
        ]
        return before - len(self._elements)

    def replace_node(self, node_id: int, replacement: MapNode) -> bool:
        """Swap the node ``node_id`` for ``replacement``; returns ``False`` if it is absent."""

        index = self._node_index().get(node_id)
        if index is None:
            return False
        self._elements[index] = replacement.to_element()
        return True

    def find_nearby(self, lat: float, lon: float, radius_m: float) -> NearbyElement | None:
        """Closest element with any position within ``radius_m``, or ``None``."""

        closest: NearbyElement | None = None
        for element in self._elements:
            for position in element.positions():
                distance = haversine_m(lat, lon, position.lat, position.lon)
                if distance > radius_m:
                    continue
                if closest is None or distance < closest.distance_m:
                    closest = NearbyElement(element=element, distance_m=distance)
        return closest
