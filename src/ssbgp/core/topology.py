from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from ssbgp.core.extenders import LinkExtender, build_extender
from ssbgp.core.types import NodeId
from ssbgp.protocols.base import NodeLinks


@dataclass(frozen=True)
class Link:
    exporter: NodeId
    importer: NodeId
    extender: LinkExtender


class Topology:
    """Directed links between nodes; routes flow from exporter to importer."""

    def __init__(self) -> None:
        self._nodes: Set[NodeId] = set()
        self._links: Dict[Tuple[NodeId, NodeId], Link] = {}

    def add_node(self, node: NodeId) -> None:
        self._nodes.add(int(node))

    def add_link(
        self,
        exporter: NodeId,
        importer: NodeId,
        local_preference: Optional[int] = None,
    ) -> Link:
        exporter, importer = int(exporter), int(importer)
        if exporter == importer:
            raise ValueError(f"Self-link on node {exporter}")
        self.add_node(exporter)
        self.add_node(importer)
        extender = build_extender(exporter, {"local_preference": local_preference})
        link = Link(exporter=exporter, importer=importer, extender=extender)
        self._links[(exporter, importer)] = link
        return link

    def nodes(self) -> List[NodeId]:
        return sorted(self._nodes)

    def links(self) -> List[Link]:
        return [self._links[key] for key in sorted(self._links)]

    def has_node(self, node: NodeId) -> bool:
        return node in self._nodes

    def links_of(self, node: NodeId) -> NodeLinks:
        in_neighbors = frozenset(exp for (exp, imp) in self._links if imp == node)
        out_links = {imp: link.extender for (exp, imp), link in self._links.items() if exp == node}
        return NodeLinks(in_neighbors=in_neighbors, out_links=out_links)

    @classmethod
    def from_config(cls, raw: Mapping[str, Any]) -> "Topology":
        topo = cls()
        for node in raw.get("nodes", []):
            topo.add_node(int(node))
        for item in raw.get("links", []):
            exporter = int(item["exporter"])
            importer = int(item["importer"])
            preference = item.get("local_preference")
            preference = None if preference is None else int(preference)
            topo.add_link(exporter, importer, preference)
            if bool(item.get("bidirectional", False)):
                reverse = item.get("reverse_local_preference", preference)
                topo.add_link(importer, exporter, None if reverse is None else int(reverse))
        return topo
