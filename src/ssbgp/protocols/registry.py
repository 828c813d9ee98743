from __future__ import annotations

from typing import Dict

from ssbgp.core.types import NodeId
from ssbgp.protocols.base import BGPProtocol, NodeLinks
from ssbgp.protocols.detection import DEFAULT_PREDICATE, LoopResponse

_REGISTRY: Dict[str, LoopResponse] = {
    "bgp": LoopResponse.PLAIN,
    "ssbgp": LoopResponse.WEAK,
    "issbgp": LoopResponse.STRONG,
}


def load_protocol(name: str) -> LoopResponse:
    """Loop response of a named protocol variant."""
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown protocol {name!r}, expected one of {available_protocols()}") from None


def available_protocols() -> list[str]:
    return sorted(_REGISTRY)


def build_protocol(
    name: str,
    node_id: NodeId,
    links: NodeLinks,
    predicate: str = DEFAULT_PREDICATE,
    withdrawals: bool = True,
    originate: bool = False,
) -> BGPProtocol:
    return BGPProtocol(
        node_id=node_id,
        links=links,
        response=load_protocol(name),
        predicate=predicate,
        withdrawals=withdrawals,
        originate=originate,
    )
