"""Path-vector routing protocol engine with Sender-Side loop detection."""

from ssbgp.core.path import Path, empty_path, path_of
from ssbgp.core.route import Route, invalid_route, self_route
from ssbgp.protocols.base import BGPProtocol, NodeLinks, ProcessResult
from ssbgp.protocols.detection import LoopResponse

__all__ = [
    "BGPProtocol",
    "LoopResponse",
    "NodeLinks",
    "Path",
    "ProcessResult",
    "Route",
    "empty_path",
    "invalid_route",
    "path_of",
    "self_route",
]
