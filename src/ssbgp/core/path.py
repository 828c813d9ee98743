from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from ssbgp.core.types import NodeId


class Path:
    """Immutable sequence of nodes traversed by a route.

    Nodes may repeat: a repeated node is exactly what loop detection looks for.
    """

    __slots__ = ("_nodes", "size")

    def __init__(self, nodes: Iterable[NodeId] = ()) -> None:
        self._nodes: Tuple[NodeId, ...] = tuple(nodes)
        self.size = len(self._nodes)

    @property
    def nodes(self) -> Tuple[NodeId, ...]:
        return self._nodes

    def append(self, node: NodeId) -> "Path":
        return Path(self._nodes + (node,))

    def contains(self, node: NodeId) -> bool:
        return node in self._nodes

    def sub_path_before(self, node: NodeId) -> "Path":
        """Nodes preceding the first occurrence of ``node`` (whole path if absent)."""
        try:
            idx = self._nodes.index(node)
        except ValueError:
            return self
        return Path(self._nodes[:idx])

    def __contains__(self, node: object) -> bool:
        return node in self._nodes

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._nodes == other._nodes

    def __hash__(self) -> int:
        return hash(self._nodes)

    def __repr__(self) -> str:
        return f"Path({list(self._nodes)})"


_EMPTY = Path()


def empty_path() -> Path:
    return _EMPTY


def path_of(*nodes: NodeId) -> Path:
    return Path(nodes)
