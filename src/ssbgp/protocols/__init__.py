"""Path-vector protocol engines."""

from ssbgp.protocols.base import BGPProtocol, NodeLinks, ProcessResult, UnknownNeighborError
from ssbgp.protocols.detection import LoopHistory, LoopRecord, LoopResponse
from ssbgp.protocols.registry import available_protocols, build_protocol, load_protocol

__all__ = [
    "BGPProtocol",
    "LoopHistory",
    "LoopRecord",
    "LoopResponse",
    "NodeLinks",
    "ProcessResult",
    "UnknownNeighborError",
    "available_protocols",
    "build_protocol",
    "load_protocol",
]
