from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set

from ssbgp.core.extenders import Extender
from ssbgp.core.route import Route, invalid_route, self_route
from ssbgp.core.routing_table import RoutingTable
from ssbgp.core.types import Message, MessageKind, NodeId
from ssbgp.protocols.detection import (
    DEFAULT_PREDICATE,
    LoopHistory,
    LoopResponse,
    RecurrencePredicate,
    load_predicate,
    on_loop_detected,
)


class UnknownNeighborError(ValueError):
    """A message references a node that is not linked to the receiver."""


@dataclass(frozen=True)
class NodeLinks:
    """Links of one node: who may send to it, and whom it exports to (with each link's extender)."""

    in_neighbors: FrozenSet[NodeId] = frozenset()
    out_links: Dict[NodeId, Extender] = field(default_factory=dict)


@dataclass
class ProcessResult:
    selection_changed: bool = False
    outbound: List[Message] = field(default_factory=list)
    dropped: bool = False
    disabled: Optional[NodeId] = None


class BGPProtocol:
    """Per-node, per-destination path-vector decision process.

    Incoming messages go through import -> learn -> table update -> selection.
    When the selection changes the new selected route is exported to every
    enabled out-neighbor. The ``response`` decides what happens when learn
    detects a loop: nothing (plain BGP), or disabling the sender when the
    loop is judged recurrent under the WEAK or STRONG condition (SS-BGP).

    Calls must not overlap: the routing table, loop history and disabled set
    are owned by this instance and mutated without locking.
    """

    def __init__(
        self,
        node_id: NodeId,
        links: NodeLinks,
        response: LoopResponse = LoopResponse.PLAIN,
        predicate: str | RecurrencePredicate = DEFAULT_PREDICATE,
        withdrawals: bool = True,
        originate: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.node_id = node_id
        self.links = links
        self.response = LoopResponse(response)
        self.predicate = load_predicate(predicate) if isinstance(predicate, str) else predicate
        self.withdrawals = bool(withdrawals)
        self.originate = bool(originate)
        self._log = logger or logging.getLogger("ssbgp.protocol")
        self.routing_table = RoutingTable()
        self.loop_history = LoopHistory()
        self._disabled: Set[NodeId] = set()
        self._last = ProcessResult()

    @property
    def disabled_neighbors(self) -> FrozenSet[NodeId]:
        return frozenset(self._disabled)

    @property
    def selected_route(self) -> Route:
        return self.routing_table.selected_route

    @property
    def selected_neighbor(self) -> Optional[NodeId]:
        return self.routing_table.selected_neighbor

    def was_selected_route_updated(self) -> bool:
        return self._last.selection_changed

    def start(self) -> ProcessResult:
        result = ProcessResult()
        if self.originate:
            self.routing_table.update(self.node_id, self_route())
            result.selection_changed = self.routing_table.select()
            if result.selection_changed:
                result.outbound = self.export(self.node_id, self.routing_table.selected_route)
        self._last = result
        return result

    def process(self, message: Message) -> ProcessResult:
        if message.receiver != self.node_id:
            raise UnknownNeighborError(
                f"node {self.node_id} received a message addressed to {message.receiver}"
            )
        sender = message.sender
        if sender not in self.links.in_neighbors:
            raise UnknownNeighborError(f"node {self.node_id} has no in-neighbor {sender}")

        if sender in self._disabled:
            self._log.debug("node %s: drop message from disabled neighbor %s", self.node_id, sender)
            self._last = ProcessResult(dropped=True)
            return self._last

        result = ProcessResult()
        self._last = result
        imported = self.import_route(message.route, message.extender)
        learned = self.learn(self.node_id, sender, imported)
        self.routing_table.update(sender, learned)

        if sender in self._disabled:
            result.disabled = sender

        result.selection_changed = self.routing_table.select()
        if result.selection_changed:
            selected = self.routing_table.selected_route
            self._log.debug(
                "node %s: selected %s via %s",
                self.node_id,
                selected.to_dict(),
                self.routing_table.selected_neighbor,
            )
            result.outbound = self.export(self.node_id, selected)
        return result

    def import_route(self, route: Route, extender: Extender) -> Route:
        return extender.extend(route)

    def learn(self, node: NodeId, sender: NodeId, route: Route) -> Route:
        if route.as_path.contains(node):
            self._on_loop_detected(sender, route)
            return invalid_route()
        return route

    def export(self, node: NodeId, route: Route) -> List[Message]:
        if route.valid:
            kind = MessageKind.ADVERTISEMENT
        elif self.withdrawals:
            kind = MessageKind.WITHDRAWAL
            route = invalid_route()
        else:
            return []
        return [
            Message(sender=node, receiver=neighbor, route=route, extender=extender, kind=kind)
            for neighbor, extender in sorted(self.links.out_links.items())
            if neighbor not in self._disabled
        ]

    def reset(self) -> None:
        self.routing_table.clear()
        self.loop_history.clear()
        self._disabled.clear()
        self._last = ProcessResult()

    def _on_loop_detected(self, sender: NodeId, route: Route) -> None:
        selected = self.routing_table.selected_route
        _, alternative = self.routing_table.best(exclude=sender)
        self._log.debug(
            "node %s: loop in route from %s path=%s",
            self.node_id,
            sender,
            list(route.as_path),
        )
        rec = on_loop_detected(
            self.response,
            node=self.node_id,
            sender=sender,
            route=route,
            selected=selected,
            alternative=alternative,
            history=self.loop_history,
            disabled=self._disabled,
            predicate=self.predicate,
        )
        if rec is not None:
            self._log.info(
                "node %s: disabled neighbor %s after %s loop(s) (%s)",
                self.node_id,
                sender,
                rec.count,
                self.response.value,
            )
