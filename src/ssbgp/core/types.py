from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from ssbgp.core.extenders import Extender
    from ssbgp.core.route import Route

NodeId = int


class MessageKind(str, Enum):
    ADVERTISEMENT = "advertisement"
    WITHDRAWAL = "withdrawal"


@dataclass(frozen=True)
class Message:
    sender: NodeId
    receiver: NodeId
    route: "Route"
    extender: "Extender"
    kind: MessageKind = MessageKind.ADVERTISEMENT


@dataclass
class RunResult:
    terminated: bool
    end_time: int
    delivered_messages: int
    selected_routes: Dict[NodeId, Optional[Dict[str, Any]]]
    disabled_neighbors: Dict[NodeId, List[NodeId]] = field(default_factory=dict)
