from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ssbgp.core.logging import JsonlLogger
from ssbgp.core.network_model import NetworkModel
from ssbgp.core.topology import Topology
from ssbgp.core.types import Message, NodeId, RunResult
from ssbgp.protocols.base import BGPProtocol, ProcessResult
from ssbgp.protocols.registry import build_protocol
from ssbgp.runtime.config import ProtocolConfig, ScenarioConfig

_log = logging.getLogger("ssbgp.engine")


class EventEngine:
    """Delivers routing messages one at a time until none remain or time runs out."""

    def __init__(
        self,
        topology: Topology,
        destination: NodeId,
        protocol_config: ProtocolConfig,
        network: NetworkModel | None = None,
        max_time: int = 1000,
        logger: JsonlLogger | None = None,
    ) -> None:
        if not topology.has_node(destination):
            raise ValueError(f"Destination {destination} is not in the topology")
        self.topology = topology
        self.destination = int(destination)
        self.protocol_config = protocol_config
        self.network = network or NetworkModel()
        self.max_time = int(max_time)
        self.logger = logger or JsonlLogger(path=None)
        self.protocols: Dict[NodeId, BGPProtocol] = {
            node: build_protocol(
                protocol_config.name,
                node_id=node,
                links=topology.links_of(node),
                predicate=protocol_config.predicate,
                withdrawals=protocol_config.withdrawals,
                originate=node == self.destination,
            )
            for node in topology.nodes()
        }

    def run(self) -> RunResult:
        for proto in self.protocols.values():
            proto.reset()
        self.network.reset()

        now = 0
        _log.info(
            "run start: protocol=%s destination=%s nodes=%s",
            self.protocol_config.name,
            self.destination,
            len(self.protocols),
        )
        self.logger.log("start", time=now, destination=self.destination, protocol=self.protocol_config.name)
        self._send_all(self.protocols[self.destination].start().outbound, now)

        terminated = True
        while len(self.network):
            due = self.network.next_due()
            if due is not None and due > self.max_time:
                terminated = False
                break
            now, msg = self.network.pop()
            outcome = self.protocols[msg.receiver].process(msg)
            self._observe(now, msg, outcome)
            self._send_all(outcome.outbound, now)

        result = RunResult(
            terminated=terminated,
            end_time=now,
            delivered_messages=self.network.delivered_messages,
            selected_routes=self.selected_routes(),
            disabled_neighbors={
                node: sorted(proto.disabled_neighbors)
                for node, proto in sorted(self.protocols.items())
                if proto.disabled_neighbors
            },
        )
        self.logger.log(
            "end",
            time=now,
            terminated=terminated,
            delivered=result.delivered_messages,
        )
        _log.info(
            "run end: terminated=%s time=%s delivered=%s",
            terminated,
            now,
            result.delivered_messages,
        )
        return result

    def selected_routes(self) -> Dict[NodeId, Optional[Dict[str, Any]]]:
        out: Dict[NodeId, Optional[Dict[str, Any]]] = {}
        for node, proto in sorted(self.protocols.items()):
            route = proto.selected_route
            if not route.valid:
                out[node] = None
                continue
            out[node] = {"neighbor": proto.selected_neighbor, **route.to_dict()}
        return out

    def _send_all(self, messages: List[Message], now: int) -> None:
        for msg in messages:
            self.network.send(msg, now)

    def _observe(self, now: int, msg: Message, result: ProcessResult) -> None:
        self.logger.log(
            "deliver",
            time=now,
            sender=msg.sender,
            receiver=msg.receiver,
            kind=msg.kind.value,
            dropped=result.dropped,
            selection_changed=result.selection_changed,
        )
        if result.disabled is not None:
            self.logger.log("disable", time=now, node=msg.receiver, neighbor=result.disabled)


def run_scenario(config: ScenarioConfig) -> RunResult:
    topology = Topology.from_config(config.topology)
    network = NetworkModel(
        base_delay=config.network.base_delay,
        jitter=config.network.jitter,
        seed=config.seed,
    )
    run_dir: Path | None = None
    if config.output_dir is not None:
        run_dir = Path(config.output_dir) / config.name
        run_dir.mkdir(parents=True, exist_ok=True)
    logger = JsonlLogger(run_dir / "events.jsonl" if run_dir else None)

    with logger:
        engine = EventEngine(
            topology=topology,
            destination=config.destination,
            protocol_config=config.protocol,
            network=network,
            max_time=config.max_time,
            logger=logger,
        )
        result = engine.run()

    if run_dir is not None:
        payload = {
            "name": config.name,
            "seed": config.seed,
            "protocol": config.protocol.name,
            "terminated": result.terminated,
            "end_time": result.end_time,
            "delivered_messages": result.delivered_messages,
            "selected_routes": {str(k): v for k, v in result.selected_routes.items()},
            "disabled_neighbors": {str(k): v for k, v in result.disabled_neighbors.items()},
            "links": [
                {
                    "exporter": link.exporter,
                    "importer": link.importer,
                    "local_preference": link.extender.local_preference,
                }
                for link in topology.links()
            ],
        }
        with (run_dir / "result.json").open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)
    return result
