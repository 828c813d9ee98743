from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from ssbgp.core.route import Route
from ssbgp.core.types import NodeId


class Extender(Protocol):
    def extend(self, route: Route) -> Route:
        ...


@dataclass(frozen=True)
class LinkExtender:
    """Attribute transform of a directed link ``exporter -> importer``.

    Prepends the exporter to the AS-PATH and, when configured, replaces the
    local preference with the one the importer assigns to routes from this link.
    Invalid routes stay invalid.
    """

    exporter: NodeId
    local_preference: Optional[int] = None

    def extend(self, route: Route) -> Route:
        if not route.valid:
            return route
        preference = route.local_preference if self.local_preference is None else self.local_preference
        return Route(
            valid=True,
            local_preference=int(preference),
            as_path=route.as_path.append(self.exporter),
        )


def build_extender(exporter: NodeId, raw: Mapping[str, Any] | None = None) -> LinkExtender:
    params = dict(raw or {})
    preference = params.get("local_preference")
    return LinkExtender(
        exporter=int(exporter),
        local_preference=None if preference is None else int(preference),
    )
