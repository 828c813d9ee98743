from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from ssbgp.core.route import Route, invalid_route, route_sort_key
from ssbgp.core.types import NodeId


class RoutingTable:
    """Candidate routes per neighbor plus the currently selected one."""

    def __init__(self) -> None:
        self._routes: Dict[NodeId, Route] = {}
        self._selected_neighbor: Optional[NodeId] = None
        self._selected_route: Route = invalid_route()

    @property
    def selected_route(self) -> Route:
        return self._selected_route

    @property
    def selected_neighbor(self) -> Optional[NodeId]:
        return self._selected_neighbor

    def get(self, neighbor: NodeId) -> Route:
        return self._routes.get(neighbor, invalid_route())

    def update(self, neighbor: NodeId, route: Route) -> None:
        self._routes[neighbor] = route

    def items(self) -> Iterator[Tuple[NodeId, Route]]:
        return iter(sorted(self._routes.items()))

    def best(self, exclude: Optional[NodeId] = None) -> Tuple[Optional[NodeId], Route]:
        best_neighbor: Optional[NodeId] = None
        best_route = invalid_route()
        best_key: Optional[Tuple[int, int, int, int]] = None
        for neighbor, route in self._routes.items():
            if neighbor == exclude or not route.valid:
                continue
            key = route_sort_key(neighbor, route)
            if best_key is None or key < best_key:
                best_neighbor, best_route, best_key = neighbor, route, key
        return best_neighbor, best_route

    def select(self) -> bool:
        """Re-run selection over all entries; True if the selection changed."""
        neighbor, route = self.best()
        if neighbor == self._selected_neighbor and route == self._selected_route:
            return False
        self._selected_neighbor = neighbor
        self._selected_route = route
        return True

    def clear(self) -> None:
        self._routes.clear()
        self._selected_neighbor = None
        self._selected_route = invalid_route()

    def __len__(self) -> int:
        return len(self._routes)
