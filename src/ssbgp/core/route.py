from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from ssbgp.core.path import Path, empty_path
from ssbgp.core.types import NodeId

INVALID_PREFERENCE = -sys.maxsize
MAX_PREFERENCE = sys.maxsize


@dataclass(frozen=True, eq=False)
class Route:
    """BGP-like route attributes: validity, local preference and AS-PATH."""

    valid: bool
    local_preference: int
    as_path: Path = field(default_factory=empty_path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        if not self.valid or not other.valid:
            return self.valid == other.valid
        return self.local_preference == other.local_preference and self.as_path == other.as_path

    def __hash__(self) -> int:
        if not self.valid:
            return hash(False)
        return hash((self.local_preference, self.as_path))

    def to_dict(self) -> Dict[str, Any]:
        if not self.valid:
            return {"valid": False}
        return {
            "valid": True,
            "local_preference": int(self.local_preference),
            "as_path": list(self.as_path),
        }


_INVALID = Route(valid=False, local_preference=INVALID_PREFERENCE, as_path=empty_path())


def invalid_route() -> Route:
    return _INVALID


def self_route() -> Route:
    """Route originated by the destination itself."""
    return Route(valid=True, local_preference=MAX_PREFERENCE, as_path=empty_path())


def route_of(local_preference: int, as_path: Path | None = None) -> Route:
    return Route(valid=True, local_preference=int(local_preference), as_path=as_path if as_path is not None else empty_path())


def route_sort_key(neighbor: NodeId, route: Route) -> Tuple[int, int, int, int]:
    """Key whose minimum is the best (neighbor, route) candidate.

    Order: valid first, then higher local preference, then shorter AS-PATH,
    then the lowest neighbor id.
    """
    if not route.valid:
        return (1, 0, 0, 0)
    return (0, -route.local_preference, route.as_path.size, neighbor)

